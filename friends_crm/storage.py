"""
Profile picture storage on Cloudinary.

Only the resulting URL is kept in the database; the image itself lives on Cloudinary.
"""

import logging
import os
from typing import BinaryIO

import cloudinary
import cloudinary.uploader
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

PROFILE_PICTURES_FOLDER = "profile-pictures"

cloudinary.config(
    cloud_name=os.getenv("CLOUDINARY_NAME"),
    api_key=os.getenv("CLOUDINARY_API_KEY"),
    api_secret=os.getenv("CLOUDINARY_API_SECRET"),
    secure=True,
)


def profile_picture_public_id(friend_id: int) -> str:
    return f"friend_{friend_id}"


def upload_profile_picture(file: BinaryIO, friend_id: int) -> str:
    """
    Uploads a picture for a friend, replacing any previous one.

    Args:
        file (BinaryIO): Image contents.
        friend_id (int): Friend the picture belongs to.

    Raises:
        cloudinary.exceptions.Error: If Cloudinary rejects the upload.

    Returns:
        str: HTTPS URL of the stored image.
    """
    result = cloudinary.uploader.upload(
        file,
        folder=PROFILE_PICTURES_FOLDER,
        public_id=profile_picture_public_id(friend_id),
        overwrite=True,
    )
    logger.info("Uploaded profile picture for friend %s", friend_id)
    return result["secure_url"]
