# create_emoji_assets.py
import os

from PIL import Image, ImageDraw

from faceswap.emoji_renderer import DEFAULT_EMOJI_DIR
from faceswap.models import EmojiCategory

SIZE = 256

# Face colour, then mouth shape: "smile", "frown", "flat", "open", "wavy" or "none"
STYLES = {
    EmojiCategory.HAPPY: ((255, 204, 77), "smile"),
    EmojiCategory.SAD: ((140, 180, 230), "frown"),
    EmojiCategory.ANGRY: ((230, 80, 60), "frown"),
    EmojiCategory.CONFUSED: ((255, 204, 77), "wavy"),
    EmojiCategory.DISGUSTED: ((150, 200, 90), "wavy"),
    EmojiCategory.SURPRISED: ((255, 204, 77), "open"),
    EmojiCategory.CALM: ((255, 214, 120), "flat"),
    EmojiCategory.UNKNOWN: ((200, 200, 200), "none"),
}


def draw_emoji(category, size=SIZE):
    colour, mouth = STYLES[EmojiCategory(category)]
    img = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)
    pad = size // 32
    draw.ellipse([pad, pad, size - pad, size - pad], fill=colour + (255,), outline=(60, 40, 0, 255), width=pad)

    # Eyes
    eye_w, eye_h = size // 10, size // 6
    for cx in (size * 0.35, size * 0.65):
        draw.ellipse([cx - eye_w / 2, size * 0.3, cx + eye_w / 2, size * 0.3 + eye_h], fill=(60, 40, 0, 255))

    box = [size * 0.28, size * 0.55, size * 0.72, size * 0.8]
    line = (60, 40, 0, 255)
    if mouth == "smile":
        draw.arc(box, start=20, end=160, fill=line, width=pad * 2)
    elif mouth == "frown":
        draw.arc([box[0], box[1] + size * 0.1, box[2], box[3] + size * 0.1], start=200, end=340, fill=line, width=pad * 2)
    elif mouth == "flat":
        draw.line([box[0], size * 0.7, box[2], size * 0.7], fill=line, width=pad * 2)
    elif mouth == "open":
        draw.ellipse([size * 0.42, size * 0.6, size * 0.58, size * 0.82], fill=line)
    elif mouth == "wavy":
        step = (box[2] - box[0]) / 4
        points = [(box[0] + i * step, size * 0.7 + (size * 0.04 if i % 2 else -size * 0.04)) for i in range(5)]
        draw.line(points, fill=line, width=pad * 2)
    else:
        draw.text((size * 0.46, size * 0.62), "?", fill=line)
    return img


def create_all_assets(output_dir=DEFAULT_EMOJI_DIR, size=SIZE):
    os.makedirs(output_dir, exist_ok=True)
    paths = []
    for category in EmojiCategory:
        path = os.path.join(output_dir, f"{category.value}.png")
        draw_emoji(category, size).save(path, format="PNG")
        paths.append(path)
    return paths


if __name__ == "__main__":
    out = os.getenv("EMOJI_DIR") or DEFAULT_EMOJI_DIR
    create_all_assets(out)
    print("Emoji asset creation finished successfully:", out)
