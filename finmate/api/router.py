from fastapi import APIRouter

from finmate.api.routes import users, categories, transactions, recurring, goals, assistant

api_router = APIRouter()

# recurring before transactions: both live under /transactions
api_router.include_router(users.router)
api_router.include_router(categories.router)
api_router.include_router(recurring.router)
api_router.include_router(transactions.router)
api_router.include_router(goals.router)
api_router.include_router(assistant.router)
