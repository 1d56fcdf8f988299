from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile
from typing import Optional, Dict
from datetime import datetime
from staybook.core.errors import ValidationError
from staybook.modules.auth.utility import get_current_user
from staybook.modules.listing.dependencies import get_listing_service, require_listing_owner
from staybook.modules.listing.filters import build_listing_filter
from staybook.modules.listing.models import ListingImage
from staybook.modules.listing.service import ListingService
from staybook.modules.listing.schemas import ListingCreate, ListingUpdate, SearchRequest

listing_router = APIRouter(tags=["Listing"])
search_router = APIRouter(tags=["Search"])


async def _read_image(upload: Optional[UploadFile]) -> Optional[ListingImage]:
    if upload is None:
        return None
    data = await upload.read()
    if not data:
        return None
    return ListingImage(data=data, content_type=upload.content_type or "application/octet-stream")


@search_router.get("/search")
async def search_listings(
    location: Optional[str] = None,
    from_: Optional[str] = Query(None, alias="from"),
    to: Optional[str] = None,
    bed: Optional[str] = None,
    listing_service: ListingService = Depends(get_listing_service)
):
    search_filter = build_listing_filter(location=location, from_=from_, to=to, bed=bed)
    return await listing_service.search_listings(search_filter)

@search_router.post("/search")
async def search_listings_form(
    criteria: SearchRequest,
    listing_service: ListingService = Depends(get_listing_service)
):
    search_filter = build_listing_filter(
        location=criteria.location, from_=criteria.from_, to=criteria.to, bed=criteria.bed
    )
    return await listing_service.search_listings(search_filter)

@listing_router.post("/listing")
async def create_listing(
    title: str = Form(..., min_length=1),
    content: str = Form(""),
    location: str = Form(..., min_length=1),
    price: float = Form(..., ge=0),
    from_date: datetime = Form(...),
    to_date: datetime = Form(...),
    bed: int = Form(..., ge=1),
    image: Optional[UploadFile] = File(None),
    current_user: Dict = Depends(get_current_user),
    listing_service: ListingService = Depends(get_listing_service)
):
    data = ListingCreate(
        title=title, content=content, location=location, price=price,
        from_date=from_date, to_date=to_date, bed=bed,
    )
    return await listing_service.create_listing(data, current_user, await _read_image(image))

@listing_router.get("/listings")
async def get_listings(listing_service: ListingService = Depends(get_listing_service)):
    return await listing_service.get_listings()

@listing_router.get("/seller-listings")
async def get_seller_listings(
    current_user: Dict = Depends(get_current_user),
    listing_service: ListingService = Depends(get_listing_service)
):
    return await listing_service.get_seller_listings(current_user)

@listing_router.get("/listing/{listing_id}")
async def get_listing_by_id(
    listing_id: str,
    listing_service: ListingService = Depends(get_listing_service)
):
    return await listing_service.get_listing_by_id(listing_id)

@listing_router.get("/listing/{listing_id}/image")
async def get_listing_image(
    listing_id: str,
    listing_service: ListingService = Depends(get_listing_service)
):
    data, content_type = await listing_service.get_listing_image(listing_id)
    return Response(content=data, media_type=content_type)

@listing_router.put("/listing/{listing_id}")
async def update_listing(
    data: ListingUpdate,
    listing: Dict = Depends(require_listing_owner),
    listing_service: ListingService = Depends(get_listing_service)
):
    return await listing_service.update_listing(listing, data)

@listing_router.put("/listing/{listing_id}/image")
async def update_listing_image(
    image: UploadFile = File(...),
    listing: Dict = Depends(require_listing_owner),
    listing_service: ListingService = Depends(get_listing_service)
):
    listing_image = await _read_image(image)
    if listing_image is None:
        raise ValidationError("Image file is empty")
    return await listing_service.update_listing_image(listing, listing_image)

@listing_router.delete("/listing/{listing_id}")
async def delete_listing(
    listing: Dict = Depends(require_listing_owner),
    listing_service: ListingService = Depends(get_listing_service)
):
    return await listing_service.delete_listing(listing)
