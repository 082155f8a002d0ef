"""
Caption suggestions from a Gemini model.

Failures never propagate: the caller keeps its current caption.
"""
import io
import logging
from typing import Optional

from .frames import FrameConfiguration, SourceImage
from .settings import FramerSettings

logger = logging.getLogger(__name__)

# Longest side of the preview sent to the model
PREVIEW_MAX_SIDE = 1024


def _jpeg_preview(source: SourceImage) -> bytes:
    preview = source.image.convert('RGB')
    preview.thumbnail((PREVIEW_MAX_SIDE, PREVIEW_MAX_SIDE))
    buffer = io.BytesIO()
    preview.save(buffer, format='JPEG', quality=90)
    return buffer.getvalue()


def _make_client(settings: FramerSettings):
    from google import genai

    return genai.Client(api_key=settings.api_key)


def suggest_caption(source: SourceImage, settings: FramerSettings, client=None) -> Optional[str]:
    """
    Ask the model for a short title for `source`.
    Returns the stripped suggestion, or None if anything went wrong.
    """
    if client is None and not settings.api_key:
        logger.warning("Caption suggestion skipped: no API key configured")
        return None

    try:
        from google.genai import types

        if client is None:
            client = _make_client(settings)
        response = client.models.generate_content(
            model=settings.caption_model,
            contents=[
                settings.caption_prompt,
                types.Part.from_bytes(data=_jpeg_preview(source), mime_type='image/jpeg'),
            ],
        )
        text = (response.text or '').strip()
    except Exception:
        # External service: any failure leaves the caption as it is
        logger.warning("Failed to generate caption for '%s'", source.name, exc_info=True)
        return None

    if not text:
        logger.warning("Caption suggestion for '%s' came back empty", source.name)
        return None
    return text


def apply_suggested_caption(config: FrameConfiguration, source: SourceImage,
                            settings: FramerSettings, client=None) -> FrameConfiguration:
    """New configuration with the suggested caption, or `config` unchanged."""
    text = suggest_caption(source, settings, client=client)
    if text is None:
        return config
    return config.with_changes(caption_text=text)
