# backend/utils/seed.py
# Data served when a collection has never been written to the store.

DEFAULT_SETTINGS = {
    "shopName": "TechMobile Electronics",
    "address": "Shop 4, Digital Plaza, Main Road",
    "phone": "9876543210",
    "gstin": "29ABCDE1234F1Z5",
    "footerMessage": "No warranty on physical damage. Goods once sold not refundable.",
    "whatsappTemplate": (
        "Dear {customer}, thank you for purchasing from {shopName}. "
        "Your Invoice #{id} of Rs. {total} is generated on {date}. Visit again!"
    ),
    "emailSubject": "Invoice #{id} from {shopName}",
    "emailBody": (
        "Dear {customer},\n\nThank you for your purchase.\n\n"
        "Invoice No: {id}\nDate: {date}\nTotal Amount: Rs. {total}\n\n"
        "Please visit us again.\n\nRegards,\n{shopName}"
    ),
}

SEED_PRODUCTS = [
    {
        "id": "1", "name": "iPhone 15 128GB", "brand": "Apple", "category": "Mobile", "hsn": "8517",
        "price": 79900, "cost": 72000, "gstPercent": 18, "stock": 2, "unit": "pcs", "barcode": "190199223344",
        "availableImeis": ["354666060011223", "354666060011224"],
    },
    {
        "id": "2", "name": "Galaxy S24 Ultra", "brand": "Samsung", "category": "Mobile", "hsn": "8517",
        "price": 129999, "cost": 115000, "gstPercent": 18, "stock": 1, "unit": "pcs", "barcode": "880123456789",
        "availableImeis": ["358889090011222"],
    },
    {
        "id": "3", "name": "USB-C Cable 1m", "brand": "Samsung", "category": "Accessories", "hsn": "8544",
        "price": 999, "cost": 400, "gstPercent": 18, "stock": 50, "unit": "pcs", "barcode": "8809988776655",
    },
    {
        "id": "4", "name": "AirPods Pro 2", "brand": "Apple", "category": "Audio", "hsn": "8518",
        "price": 24900, "cost": 20000, "gstPercent": 18, "stock": 5, "unit": "pcs", "barcode": "190199556677",
        "availableImeis": ["H34K22L99", "H34K22L00", "H34K22L01"],
    },
    {
        "id": "5", "name": "Tempered Glass", "brand": "Generic", "category": "Accessories", "hsn": "7007",
        "price": 299, "cost": 50, "gstPercent": 18, "stock": 100, "unit": "pcs", "barcode": "8901122330000",
    },
]

WALK_IN_NAME = "Walk-in Customer"

SEED_CUSTOMERS = [
    {"id": "1", "name": WALK_IN_NAME, "mobile": "", "email": "", "address": ""},
    {"id": "2", "name": "Rahul Sharma", "mobile": "9898989898", "email": "rahul@example.com", "address": "45, MG Road"},
]

USERS = [
    {"id": "1", "username": "admin", "role": "ADMIN", "name": "Store Owner"},
    {"id": "2", "username": "staff", "role": "STAFF", "name": "Sales Executive"},
]
