from enum import Enum


class NoticeAudience(str, Enum):
    everyone = "Everyone"
    students = "Students"
    teachers = "Teachers"


class NoticePriority(str, Enum):
    low = "Low"
    medium = "Medium"
    high = "High"
