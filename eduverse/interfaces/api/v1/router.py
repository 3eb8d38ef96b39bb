from fastapi import APIRouter

from eduverse.interfaces.api.v1.routes.auth import router as auth_router
from eduverse.interfaces.api.v1.routes.classes import router as classes_router
from eduverse.interfaces.api.v1.routes.invoices import router as invoices_router
from eduverse.interfaces.api.v1.routes.ledgers import router as ledgers_router
from eduverse.interfaces.api.v1.routes.notices import router as notices_router
from eduverse.interfaces.api.v1.routes.payments import router as payments_router
from eduverse.interfaces.api.v1.routes.ping import router as ping_router
from eduverse.interfaces.api.v1.routes.users import router as users_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth_router)
api_router.include_router(classes_router)
api_router.include_router(invoices_router)
api_router.include_router(ledgers_router)
api_router.include_router(notices_router)
api_router.include_router(payments_router)
api_router.include_router(ping_router)
api_router.include_router(users_router)
