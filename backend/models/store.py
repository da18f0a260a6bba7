from sqlalchemy import Column, String, DateTime, JSON, func
from database import Base

# Key-value entry holding one persisted collection (products, customers,
# invoices, settings, session) as a JSON document.
class StoreEntry(Base):
    __tablename__ = "store_entries"

    key = Column(String(64), primary_key=True, index=True)
    value = Column(JSON, nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
