from io import BytesIO
from PIL import Image, ImageOps, UnidentifiedImageError


# width : height
PHOTO_RATIO = 3 / 4


def normalize_student_photo(data, max_width=600, quality=85):
    """
    Center-crop an uploaded photo to 3:4, downscale it to ``max_width`` and
    re-encode it as JPEG. Raises ValueError for unreadable images.
    """
    try:
        img = Image.open(BytesIO(data))
        img.load()
    except (UnidentifiedImageError, OSError) as e:
        raise ValueError("Gagal membaca gambar") from e

    # --- FIX ORIENTATION ---
    img = ImageOps.exif_transpose(img)

    width, height = img.size
    if not width or not height:
        raise ValueError("Gagal membaca dimensi gambar")

    # --- CROP TO 3:4 ---
    crop_width, crop_height = width, height
    if width / height > PHOTO_RATIO:
        crop_width = round(height * PHOTO_RATIO)
    else:
        crop_height = round(width / PHOTO_RATIO)

    left = (width - crop_width) // 2
    top = (height - crop_height) // 2
    img = img.crop((left, top, left + crop_width, top + crop_height))

    # --- RESIZE AND COMPRESS ---
    if crop_width > max_width:
        scale = max_width / crop_width
        img = img.resize(
            (round(crop_width * scale), round(crop_height * scale)),
            Image.LANCZOS
        )

    output = BytesIO()
    img.convert("RGB").save(output, format="JPEG", optimize=True, quality=quality)

    return output.getvalue()
