from sqlalchemy.orm import Session
from storefront.db.session import SessionLocal
from storefront.services.orders import OrderWorkflow
from fastapi import Depends

def get_db():
    db = SessionLocal()
    try: yield db
    finally: db.close()

def get_order_workflow(db: Session = Depends(get_db)) -> OrderWorkflow:
    return OrderWorkflow(db)
