"""
Photo gallery routes.

Usage:
    1. GET    /api/galleries/wedding/{wedding_id}  - Inspiration boards and event albums (owner)
    2. GET    /api/galleries/vendor/{vendor_id}    - Portfolio; public galleries unless you run the vendor
    3. POST   /api/galleries                       - Create for a wedding or a vendor
    4. GET    /api/galleries/{gallery_id}
    5. PATCH  /api/galleries/{gallery_id}
    6. DELETE /api/galleries/{gallery_id}
"""

from fastapi import APIRouter, Depends, HTTPException, Response, status

from viah.auth.access import ensure_vendor_access, ensure_wedding_access, owns_vendor
from viah.auth.verify import auth_dependency
from viah.features.galleries.domain import GalleryCreate, GalleryUpdate, PhotoGallery
from viah.features.galleries.repository import GalleryRepository
from viah.features.vendors.repository import VendorRepository

router = APIRouter(prefix="/api/galleries", tags=["galleries"])


async def _ensure_owner(claims: dict, wedding_id: str | None, vendor_id: str | None) -> None:
    if vendor_id:
        await ensure_vendor_access(claims, vendor_id)
    else:
        await ensure_wedding_access(claims, wedding_id)


async def _load_gallery(gallery_id: str) -> PhotoGallery:
    gallery = await GalleryRepository.get(gallery_id)
    if not gallery:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Gallery not found")
    return gallery


@router.get("/wedding/{wedding_id}", response_model=list[PhotoGallery])
async def list_wedding_galleries(wedding_id: str, claims: dict = Depends(auth_dependency)):
    await ensure_wedding_access(claims, wedding_id)
    return await GalleryRepository.list_for_wedding(wedding_id)


@router.get("/vendor/{vendor_id}", response_model=list[PhotoGallery])
async def list_vendor_galleries(vendor_id: str, claims: dict = Depends(auth_dependency)):
    vendor = await VendorRepository.get(vendor_id)
    if not vendor:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Vendor not found")
    return await GalleryRepository.list_for_vendor(vendor_id, public_only=not owns_vendor(claims, vendor))


@router.post("", response_model=PhotoGallery, status_code=status.HTTP_201_CREATED)
async def create_gallery(payload: GalleryCreate, claims: dict = Depends(auth_dependency)):
    await _ensure_owner(claims, payload.wedding_id, payload.vendor_id)
    return await GalleryRepository.create(payload)


@router.get("/{gallery_id}", response_model=PhotoGallery)
async def get_gallery(gallery_id: str, claims: dict = Depends(auth_dependency)):
    gallery = await _load_gallery(gallery_id)
    if not gallery.is_public:
        await _ensure_owner(claims, gallery.wedding_id, gallery.vendor_id)
    return gallery


@router.patch("/{gallery_id}", response_model=PhotoGallery)
async def update_gallery(gallery_id: str, payload: GalleryUpdate, claims: dict = Depends(auth_dependency)):
    gallery = await _load_gallery(gallery_id)
    await _ensure_owner(claims, gallery.wedding_id, gallery.vendor_id)
    updated = await GalleryRepository.update(gallery_id, payload)
    if not updated:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Gallery not found")
    return updated


@router.delete("/{gallery_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_gallery(gallery_id: str, claims: dict = Depends(auth_dependency)):
    gallery = await _load_gallery(gallery_id)
    await _ensure_owner(claims, gallery.wedding_id, gallery.vendor_id)
    await GalleryRepository.delete(gallery_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
