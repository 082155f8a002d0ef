import argparse
import logging
import sys

from .frames import FONT_OPTIONS, FrameConfiguration, font_family_for
from .pipeline import FramePipeline
from .settings import get_settings


def build_parser() -> argparse.ArgumentParser:
    defaults = FrameConfiguration()
    parser = argparse.ArgumentParser(description="Frame photos on a 300 DPI A4 page with a captioned border")
    parser.add_argument('--input', '-i', required=True, nargs='+', help="Input image path(s)")
    parser.add_argument('--output', '-o', required=True, help="Output directory")
    parser.add_argument('--caption', '-c', default=defaults.caption_text,
                        help="Caption text shared by all images ('' for none)")
    parser.add_argument('--suggest-caption', action='store_true',
                        help="Ask Gemini for a caption based on the first image")
    parser.add_argument('--margin-mm', type=float, default=defaults.margin_mm,
                        help="Distance from page edge to border, mm")
    parser.add_argument('--line-thickness', type=float, default=defaults.line_thickness_px,
                        help="Border thickness in screen pixels (96 DPI)")
    parser.add_argument('--font', default='serif',
                        help=f"One of {', '.join(FONT_OPTIONS)}, a family list or a .ttf path")
    parser.add_argument('--font-size', type=float, default=defaults.font_size_pt, help="Caption size, pt")
    parser.add_argument('--bold', action='store_true', help="Bold caption")
    parser.add_argument('--rounded', action='store_true', help="Round the border corners")
    parser.add_argument('--corner-radius-mm', type=float, default=defaults.corner_radius_mm)
    parser.add_argument('--text-color', default=defaults.text_color)
    parser.add_argument('--line-color', default=defaults.line_color)
    parser.add_argument('--delay', type=float, default=None,
                        help="Seconds to wait between batch items")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper(),
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    try:
        config = FrameConfiguration(
            line_thickness_px=args.line_thickness,
            margin_mm=args.margin_mm,
            caption_text=args.caption,
            font_family=font_family_for(args.font),
            font_size_pt=args.font_size,
            is_bold=args.bold,
            text_color=args.text_color,
            line_color=args.line_color,
            is_rounded=args.rounded,
            corner_radius_mm=args.corner_radius_mm,
        )

        print(f"Loading {len(args.input)} image(s)...")
        pipeline = FramePipeline(config).load(*args.input)

        if args.suggest_caption:
            print("Asking for a caption suggestion...")
            pipeline.suggest_caption(settings)
            print(f"Caption: {pipeline.config.caption_text!r}")

        if len(pipeline.sources) == 1:
            path = pipeline.save(args.output)
            print(f"Saved to {path}")
        else:
            delay = settings.export_delay_sec if args.delay is None else args.delay
            print(f"Exporting {len(pipeline.sources)} images to {args.output}...")
            result = pipeline.save_all(args.output, delay=delay)
            for filename in result.saved:
                print(f"Saved {filename}")
            for name, error in result.failed:
                print(f"Failed {name}: {error}", file=sys.stderr)
            if result.failed:
                sys.exit(1)

    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

if __name__ == "__main__":
    main()
