#!/usr/bin/env python3
"""
Initialize the SocialPilot upload folder and image pool
=======================================================
Creates the upload directory that drafts pick their images from and,
optionally, copies a folder of images into the pool.

Usage:
    python scripts/init_workspace.py [--upload-dir ./uploads] [--import-from ~/Pictures/brand]
"""

import argparse
from pathlib import Path

from socialpilot.config import get_settings
from socialpilot.errors import ValidationError
from socialpilot.worker.image_selector import IMAGE_EXTENSIONS, ImageStore


def init_workspace(upload_dir: str, import_from: str = None, dry_run: bool = False):
    """Create the image pool and import images into it."""
    store = ImageStore(upload_dir)

    print(f"Initializing image pool at: {store.images_dir}")
    print("-" * 50)

    if dry_run:
        print(f"[DRY RUN] Would create: {store.images_dir}")
    else:
        store.list_images()  # creates the directory
        print(f"✓ Ready: {store.images_dir}")

    if import_from:
        source = Path(import_from).expanduser()
        for path in sorted(source.iterdir()):
            if not path.is_file() or path.suffix.lower() not in IMAGE_EXTENSIONS:
                continue
            if dry_run:
                print(f"[DRY RUN] Would import: {path.name}")
                continue
            try:
                store.save_image(path.name, path.read_bytes())
                print(f"✓ Imported: {path.name}")
            except ValidationError as e:
                print(f"✗ Skipped {path.name}: {e.message}")

    print("-" * 50)
    print(f"Image pool contains {len(store.list_images()) if not dry_run else 0} images")


def main():
    parser = argparse.ArgumentParser(description="Initialize the SocialPilot image pool")
    parser.add_argument(
        "--upload-dir",
        default=get_settings().upload_dir,
        help="Upload directory (default: UPLOAD_DIR setting)"
    )
    parser.add_argument(
        "--import-from",
        help="Folder of images to copy into the pool"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be created without making changes"
    )
    args = parser.parse_args()

    init_workspace(args.upload_dir, args.import_from, args.dry_run)


if __name__ == "__main__":
    main()
