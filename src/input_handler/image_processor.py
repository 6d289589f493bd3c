"""
Image Processor Module.

This module loads scanned judgment images and prepares them for OCR:
    - Image loading and validation
    - Orientation correction from EXIF data
    - Grayscale conversion and contrast enhancement

Supports: JPG, JPEG, PNG, TIFF, BMP

Author: ML Engineering Team
"""

from pathlib import Path
from typing import List, Union

from PIL import Image, ImageOps, UnidentifiedImageError

from config import get_config
from src.utils.logger import get_logger
from src.utils.exceptions import CorruptedFileError

# Initialize module logger
logger = get_logger(__name__)


class ImageProcessor:
    """
    Processor for image files (JPG, PNG, TIFF, BMP).

    Multi-frame TIFFs yield one image per frame.

    Attributes:
        auto_orient: Whether to auto-correct orientation
        enhance_contrast: Whether to apply contrast enhancement

    Example:
        >>> processor = ImageProcessor()
        >>> pages = processor.load("judgment.png")
    """

    def __init__(self) -> None:
        """Initialize the image processor with configuration."""
        self.auto_orient = get_config("input.image.auto_orient", True)
        self.enhance_contrast = get_config("input.image.enhance_contrast", True)

        logger.debug(
            f"ImageProcessor initialized (auto_orient={self.auto_orient}, "
            f"enhance_contrast={self.enhance_contrast})"
        )

    def load(self, filepath: Union[str, Path]) -> List[Image.Image]:
        """
        Load an image file as OCR-ready page images.

        Args:
            filepath: Path to the image file.

        Returns:
            List of PIL Images, one per frame.

        Raises:
            CorruptedFileError: If the image cannot be read.
        """
        filepath = Path(filepath)
        logger.info(f"Processing image: {filepath.name}")

        try:
            with Image.open(filepath) as image:
                image.load()
                frames = []
                for index in range(getattr(image, 'n_frames', 1)):
                    image.seek(index)
                    frames.append(self.prepare(image.copy()))
        except (UnidentifiedImageError, OSError) as e:
            logger.error(f"Could not read image {filepath.name}: {e}")
            raise CorruptedFileError(str(filepath), str(e))

        return frames

    def prepare(self, image: Image.Image) -> Image.Image:
        """Orient, grayscale and stretch contrast for OCR."""
        if self.auto_orient:
            image = ImageOps.exif_transpose(image)
        image = ImageOps.grayscale(image)
        if self.enhance_contrast:
            image = ImageOps.autocontrast(image)
        return image
