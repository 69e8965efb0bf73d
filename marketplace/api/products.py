"""
Product catalogue endpoints.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..core.exceptions import MarketplaceError, NotFoundError, PermissionDeniedError
from ..models.product import ProductDocument
from ..repositories import OrderRepository, ProductRepository, ReviewRepository, UserRepository
from ..repositories.product import build_search_filter
from ..schemas.product import CreateProductRequest, CreateReviewRequest, SortField, SortOrder, UpdateProductRequest
from ..services.reviews import create_review
from ..utils.dependencies import (
    CurrentUser,
    PageParams,
    build_pagination,
    get_current_user,
    get_optional_user,
    get_order_repository,
    get_product_repository,
    get_review_repository,
    get_user_repository,
    require_seller,
    validate_object_id,
)
from ..utils.serializers import serialize_doc, serialize_docs

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["Products"])

RECENT_REVIEWS = 5


def _can_manage(product: Dict[str, Any], user: CurrentUser) -> bool:
    return user.is_admin or str(product.get("seller")) == user.id


@router.get("")
async def list_products(
    q: Optional[str] = Query(None, description="Search in name and description"),
    category: Optional[str] = Query(None, description="Exact category"),
    min_price: Optional[float] = Query(None, ge=0, description="Minimum price filter"),
    max_price: Optional[float] = Query(None, ge=0, description="Maximum price filter"),
    sort_by: SortField = Query("created_at"),
    sort_order: SortOrder = Query("desc"),
    params: PageParams = Depends(),
    products: ProductRepository = Depends(get_product_repository),
):
    """List active products with optional filtering, sorting and pagination"""
    try:
        filter_query: Dict[str, Any] = {"is_active": True}

        if q:
            filter_query.update(build_search_filter(q))

        if category:
            filter_query["category"] = category

        if min_price is not None or max_price is not None:
            price_filter = {}
            if min_price is not None:
                price_filter["$gte"] = min_price
            if max_price is not None:
                price_filter["$lte"] = max_price
            filter_query["price"] = price_filter

        result = await products.find_all_with_seller(
            filter_query,
            sort=[(sort_by, 1 if sort_order == "asc" else -1)],
            limit=params.limit,
            skip=params.skip,
        )
        total = result["pagination"]["total"]

        return {
            "success": True,
            "products": serialize_docs(result["data"]),
            "pagination": build_pagination(total, params.page, params.limit, total_key="total_products"),
            "filters": {
                "search": q,
                "category": category,
                "min_price": min_price,
                "max_price": max_price,
                "sort_by": sort_by,
                "sort_order": sort_order,
            },
        }
    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"Failed to fetch products: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to fetch products: {str(e)}")


@router.get("/categories/list")
async def list_product_categories(products: ProductRepository = Depends(get_product_repository)):
    return {"success": True, "categories": await products.categories()}


@router.get("/featured")
async def featured_products(
    limit: int = Query(8, ge=1, le=50),
    products: ProductRepository = Depends(get_product_repository),
):
    featured = await products.get_featured(limit=limit)
    return {"success": True, "products": serialize_docs(featured)}


@router.get("/seller/my-products")
async def my_products(
    params: PageParams = Depends(),
    seller: CurrentUser = Depends(require_seller),
    products: ProductRepository = Depends(get_product_repository),
):
    """The seller's own listings, inactive ones included, with catalogue stats."""
    result = await products.find_by_seller(seller.id, limit=params.limit, skip=params.skip)
    stats = await products.get_stats(seller.id)
    return {
        "success": True,
        "products": serialize_docs(result["data"]),
        "stats": stats,
        "pagination": build_pagination(result["pagination"]["total"], params.page, params.limit),
    }


@router.get("/{product_id}")
async def get_product(
    product_id: str,
    current: Optional[CurrentUser] = Depends(get_optional_user),
    products: ProductRepository = Depends(get_product_repository),
    reviews: ReviewRepository = Depends(get_review_repository),
):
    """
    Get a specific product by ID with its seller and latest reviews.
    Inactive products are visible only to their seller and to admins.
    """
    try:
        validate_object_id(product_id, "product")

        product = await products.find_by_id_with_seller(product_id)
        if not product:
            raise NotFoundError("Product not found")
        if not product.get("is_active", False):
            seller = product.get("seller")
            seller_id = seller.get("_id") if isinstance(seller, dict) else seller
            if current is None or not _can_manage({"seller": seller_id}, current):
                raise NotFoundError("Product not found")

        recent = await reviews.find_by_product(product_id, limit=RECENT_REVIEWS)
        return {
            "success": True,
            "product": serialize_doc(product),
            "reviews": serialize_docs(recent["data"]),
        }
    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"Failed to fetch product {product_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to fetch product: {str(e)}")


@router.post("", status_code=201)
async def create_product(
    payload: CreateProductRequest,
    current: CurrentUser = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
    products: ProductRepository = Depends(get_product_repository),
):
    """List a new product; only verified sellers may sell"""
    try:
        if current.role != "seller":
            raise PermissionDeniedError("Only sellers can create products")

        seller = await users.find_by_id(current.id)
        if not seller or not (seller.get("seller_info") or {}).get("verified", False):
            raise PermissionDeniedError("Seller account must be verified to create products")

        product_doc = ProductDocument(seller=current.object_id, **payload.model_dump())
        product = await products.create(product_doc.to_document())

        logger.info(f"Product created: {product['name']} (ID: {product['_id']})")
        return {"success": True, "message": "Product created successfully", "product": serialize_doc(product)}
    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"Failed to create product: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to create product: {str(e)}")


@router.put("/{product_id}")
async def update_product(
    product_id: str,
    payload: UpdateProductRequest,
    current: CurrentUser = Depends(get_current_user),
    products: ProductRepository = Depends(get_product_repository),
):
    """Update a product (owner or admin)"""
    try:
        validate_object_id(product_id, "product")

        product = await products.find_by_id(product_id)
        if not product:
            raise NotFoundError("Product not found")
        if not _can_manage(product, current):
            raise PermissionDeniedError("Not authorized to update this product")

        update = payload.model_dump(exclude_unset=True, exclude_none=True)
        if "is_active" in update and not current.is_admin:
            raise PermissionDeniedError("Not authorized to change product status")

        if not update:
            return {"success": True, "message": "Product updated successfully", "product": serialize_doc(product)}

        updated = await products.update_by_id(product_id, update)
        logger.info(f"Product updated: {product_id}")
        return {"success": True, "message": "Product updated successfully", "product": serialize_doc(updated)}
    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"Failed to update product {product_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to update product: {str(e)}")


@router.delete("/{product_id}")
async def delete_product(
    product_id: str,
    current: CurrentUser = Depends(get_current_user),
    products: ProductRepository = Depends(get_product_repository),
):
    """Soft-delete a product (owner or admin)"""
    try:
        validate_object_id(product_id, "product")

        product = await products.find_by_id(product_id)
        if not product:
            raise NotFoundError("Product not found")
        if not _can_manage(product, current):
            raise PermissionDeniedError("Not authorized to delete this product")

        await products.soft_delete(product_id)
        logger.info(f"Product deleted: {product_id}")
        return {"success": True, "message": "Product deleted successfully"}
    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"Failed to delete product {product_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to delete product: {str(e)}")


@router.get("/{product_id}/reviews")
async def get_product_reviews(
    product_id: str,
    params: PageParams = Depends(),
    reviews: ReviewRepository = Depends(get_review_repository),
):
    validate_object_id(product_id, "product")
    result = await reviews.find_by_product(product_id, limit=params.limit, skip=params.skip)
    rating = await reviews.get_product_rating(product_id)
    return {
        "success": True,
        "reviews": serialize_docs(result["data"]),
        "rating": rating,
        "pagination": build_pagination(result["pagination"]["total"], params.page, params.limit),
    }


@router.post("/{product_id}/reviews", status_code=201)
async def add_product_review(
    product_id: str,
    payload: CreateReviewRequest,
    current: CurrentUser = Depends(get_current_user),
    reviews: ReviewRepository = Depends(get_review_repository),
    products: ProductRepository = Depends(get_product_repository),
    orders: OrderRepository = Depends(get_order_repository),
):
    validate_object_id(product_id, "product")
    if payload.order_id is not None:
        validate_object_id(payload.order_id, "order")

    review = await create_review(reviews, products, orders, current.id, product_id, payload.model_dump())
    return {"success": True, "message": "Review added successfully", "review": serialize_doc(review)}
