# backend/main.py
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn
from dotenv import load_dotenv

load_dotenv()

from config import settings
from database import init_db

# Router imports
from routes.auth import router as auth_router
from routes.products import router as products_router
from routes.customers import router as customers_router
from routes.cart import router as cart_router
from routes.invoice import router as invoice_router
from routes.settings import router as settings_router
from routes.stats import router as stats_router
from routes.reports import router as reports_router
from routes.logs import router as logs_router

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

# Initialization
init_db()

app = FastAPI(title="ShopFlow POS API", version="1.0.0")

# CORS: local dev frontends plus the configured one
origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173"
]

if settings.FRONTEND_URL:
    origins.append(settings.FRONTEND_URL)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Router registration
app.include_router(auth_router)
app.include_router(products_router)
app.include_router(customers_router)
app.include_router(cart_router)
app.include_router(invoice_router)
app.include_router(settings_router)
app.include_router(stats_router)
app.include_router(reports_router)
app.include_router(logs_router)

@app.get("/")
def read_root():
    return {"message": "ShopFlow POS API is running"}


def run():
    """Serve the API with uvicorn (`shopflow-pos` console script)."""
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
