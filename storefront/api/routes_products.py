from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session
from storefront.api.deps import get_db
from storefront.core.auth import require_admin
from storefront.core.errors import InvalidInput, NotFound, ProductNotFound
from storefront.db.models import Product
from storefront.schemas import (
    PRODUCT_CATEGORIES,
    parse_id,
    ProductCreate,
    ProductEnvelope,
    ProductListEnvelope,
    ProductRead,
    ProductUpdate,
)

router = APIRouter()

def _get_product(db: Session, product_id: str) -> Product:
    key = parse_id(product_id)
    obj = db.get(Product, key) if key is not None else None
    if not obj: raise ProductNotFound(product_id)
    return obj

@router.post('', response_model=ProductEnvelope, status_code=201)
def create_product(payload: ProductCreate, db: Session = Depends(get_db), _=Depends(require_admin)):
    if db.query(Product).filter(Product.name == payload.name).first():
        raise InvalidInput('Product already exists')
    obj = Product(**payload.model_dump())
    db.add(obj); db.commit(); db.refresh(obj)
    return {'message': 'Product created successfully', 'product': obj}

@router.get('/all', response_model=ProductListEnvelope)
def list_products(db: Session = Depends(get_db)):
    products = db.execute(select(Product).order_by(Product.id)).scalars().all()
    return {'message': 'Products retrieved successfully', 'products': products}

@router.get('/category/{category}', response_model=ProductListEnvelope)
def list_products_by_category(category: str, db: Session = Depends(get_db)):
    category = category.strip().lower()
    if category not in PRODUCT_CATEGORIES:
        raise InvalidInput(f'{category} is not a valid category')
    products = db.execute(select(Product).where(Product.category == category).order_by(Product.id)).scalars().all()
    if not products:
        raise NotFound('No products found in this category')
    return {'message': f'Products retrieved successfully in category: {category}', 'products': products}

@router.get('/{product_id}', response_model=ProductEnvelope)
def get_product(product_id: str, db: Session = Depends(get_db)):
    obj = _get_product(db, product_id)
    return {'message': 'Product retrieved successfully', 'product': obj}

@router.put('/{product_id}', response_model=ProductEnvelope)
def update_product(product_id: str, payload: ProductUpdate, db: Session = Depends(get_db), _=Depends(require_admin)):
    obj = _get_product(db, product_id)
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if 'name' in changes and changes['name'] != obj.name:
        if db.query(Product).filter(Product.name == changes['name']).first():
            raise InvalidInput('Product already exists')
    for k, v in changes.items(): setattr(obj, k, v)
    db.add(obj); db.commit(); db.refresh(obj)
    return {'message': 'Product updated successfully', 'product': obj}

@router.delete('/{product_id}', response_model=ProductEnvelope)
def delete_product(product_id: str, db: Session = Depends(get_db), _=Depends(require_admin)):
    obj = _get_product(db, product_id)
    deleted = ProductRead.model_validate(obj)
    db.delete(obj); db.commit()
    return {'message': 'Product deleted successfully', 'product': deleted}
