import os
import sys
from PIL import Image, ImageDraw
from a4framer.cli import main
from unittest.mock import patch

def create_test_image(path, size=(800, 600)):
    # Create a nice colorful test image
    img = Image.new('RGB', size, color='skyblue')
    d = ImageDraw.Draw(img)
    w, h = size
    d.rectangle([w // 8, h * 2 // 3, w * 7 // 8, h], fill='lightgreen', outline=None)
    d.ellipse([w * 3 // 4, h // 12, w * 7 // 8, h // 4], fill='yellow', outline=None)
    img.save(path)
    print(f"Created test image at {path}")

def test_cli():
    inputs = [("test_landscape.jpg", (800, 600)), ("test_portrait.jpg", (600, 1200))]
    for path, size in inputs:
        if not os.path.exists(path):
            create_test_image(path, size)
        else:
            print(f"Using existing {path}...")

    out_dir = "framed"
    test_cases = [
        (["test_landscape.jpg"], []),
        (["test_landscape.jpg"], ["--rounded", "--bold", "--caption", "Summer"]),
        (["test_portrait.jpg"], ["--caption", ""]),
        (["test_landscape.jpg", "test_portrait.jpg"], ["--delay", "0.1", "--font", "sans"]),
    ]

    for input_paths, extra in test_cases:
        args = ['a4framer', '--input', *input_paths, '--output', out_dir, *extra]

        print(f"\nRunning with args: {args}")
        with patch.object(sys, 'argv', args):
            try:
                main()
                expected = [os.path.join(out_dir, f"{os.path.basename(p).split('.')[0]}-framed.png")
                            for p in input_paths]
                missing = [p for p in expected if not os.path.exists(p)]
                if missing:
                    print(f"FAILURE: {missing} not found.")
                else:
                    print(f"SUCCESS: {expected} created.")
            except SystemExit as e:
                print(f"CLI exited with code {e}")
            except Exception as e:
                print(f"CLI crashed with {e}")

if __name__ == "__main__":
    test_cli()
