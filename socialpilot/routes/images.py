"""
Image pool routes: list, inspect and delete images drafts can use.
"""
from fastapi import APIRouter, Depends

from ..auth import get_required_user
from ..models.user import User
from ..services import get_image_store
from ..worker.image_selector import ImageStore

router = APIRouter(prefix="/api/images", tags=["images"])


@router.get("")
def get_images(
    current_user: User = Depends(get_required_user),
    store: ImageStore = Depends(get_image_store),
):
    """List every image in the pool."""
    images = [image.to_dict() for image in store.list_images()]
    return {"images": images, "total": len(images)}


@router.get("/{filename}/metadata")
def get_image_metadata(
    filename: str,
    current_user: User = Depends(get_required_user),
    store: ImageStore = Depends(get_image_store),
):
    return {"metadata": store.get_metadata(filename)}


@router.delete("/{filename}")
def delete_image(
    filename: str,
    current_user: User = Depends(get_required_user),
    store: ImageStore = Depends(get_image_store),
):
    """Remove an image from the pool."""
    store.delete_image(filename)
    return {"message": "Image deleted successfully"}
