"""
Persistence for photo gallery records.
"""

from datetime import UTC, datetime

from viah.db.helpers import DatabaseError, build_update, execute_query, fetch_all, fetch_one
from viah.features.galleries.domain import GalleryCreate, GalleryUpdate, PhotoGallery


class GalleryRepositoryError(DatabaseError):
    """More specific exception for gallery persistence failures."""


class GalleryRepository:
    GALLERY_COLUMNS = """
        id, name, type, wedding_id, vendor_id, event_id, description,
        cover_photo_url, is_public, created_at, updated_at
    """

    @classmethod
    def _row_to_gallery(cls, row: dict | None) -> PhotoGallery | None:
        return PhotoGallery.model_validate(row) if row else None

    @classmethod
    async def get(cls, gallery_id: str) -> PhotoGallery | None:
        query = f"SELECT {cls.GALLERY_COLUMNS} FROM photo_galleries WHERE id = %s"
        return cls._row_to_gallery(await fetch_one(query, (gallery_id,)))

    @classmethod
    async def list_for_wedding(cls, wedding_id: str) -> list[PhotoGallery]:
        query = f"""
            SELECT {cls.GALLERY_COLUMNS}
            FROM photo_galleries
            WHERE wedding_id = %s
            ORDER BY created_at DESC
        """
        return [cls._row_to_gallery(row) for row in await fetch_all(query, (wedding_id,))]

    @classmethod
    async def list_for_vendor(cls, vendor_id: str, *, public_only: bool) -> list[PhotoGallery]:
        query = f"""
            SELECT {cls.GALLERY_COLUMNS}
            FROM photo_galleries
            WHERE vendor_id = %s AND (is_public OR NOT %s)
            ORDER BY created_at DESC
        """
        return [cls._row_to_gallery(row) for row in await fetch_all(query, (vendor_id, public_only))]

    @classmethod
    async def create(cls, payload: GalleryCreate) -> PhotoGallery:
        query = f"""
            INSERT INTO photo_galleries (
                name, type, wedding_id, vendor_id, event_id, description, cover_photo_url, is_public
            )
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
            RETURNING {cls.GALLERY_COLUMNS}
        """
        row = await fetch_one(
            query,
            (
                payload.name,
                payload.type,
                payload.wedding_id,
                payload.vendor_id,
                payload.event_id,
                payload.description,
                payload.cover_photo_url,
                payload.is_public,
            ),
        )
        if not row:
            raise GalleryRepositoryError("Failed to create gallery", operation="create_gallery")
        return cls._row_to_gallery(row)

    @classmethod
    async def update(cls, gallery_id: str, payload: GalleryUpdate) -> PhotoGallery | None:
        values = payload.model_dump(exclude_unset=True)
        if not values:
            return await cls.get(gallery_id)
        values["updated_at"] = datetime.now(UTC)
        query, params = build_update("photo_galleries", values, {"id": gallery_id}, cls.GALLERY_COLUMNS)
        return cls._row_to_gallery(await fetch_one(query, params))

    @classmethod
    async def delete(cls, gallery_id: str) -> bool:
        return await execute_query("DELETE FROM photo_galleries WHERE id = %s", (gallery_id,)) > 0
