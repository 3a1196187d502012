# cli version of stegochaos for people who like the terminal (like me lol)
# honestly sometimes it's just faster than starting the server
#
# how to use it:
#   hide a message:
#     python cli.py encode -i photo.png -m "Top secret!" -o photo_stego.png -k mykey
#     python cli.py encode -i photo.png -f secret.txt -o photo_stego.png -k mykey
#
#   reveal a message:
#     python cli.py decode -i photo_stego.png -k mykey
#
#   check how much you can hide in an image:
#     python cli.py info -i photo.png
#
#   add -v before the command to see debug logs

import argparse
import logging
import sys
from pathlib import Path

from steganography import encode_message, decode_message, image_capacity


def cmd_encode(args):
    # message comes straight from -m or gets read out of the -f file
    message = args.message
    if args.file:
        message = Path(args.file).read_text(encoding="utf-8")

    print(f"\n[→] Encoding message into '{args.image}' ...")
    result = encode_message(
        image_path=args.image,
        message=message,
        output_path=args.output,
        key=args.key,
    )
    if result["success"]:
        print(f"[✓] {result['message']}")
        print(f"    Output : {args.output}")
        print(f"    Used   : {result['used']} chars  |  Capacity: {result['capacity']} chars")
    else:
        print(f"[✗] {result['message']}", file=sys.stderr)
        sys.exit(1)


def cmd_decode(args):
    # reads the stego image and prints whatever secret message is inside
    print(f"\n[→] Decoding message from '{args.image}' ...")
    result = decode_message(image_path=args.image, key=args.key)
    if result["success"]:
        print(f"[✓] {result['message']}")
        print("\n── Secret Message ─────────────────────────────────────")
        # lone surrogates (wrong key, odd input) would crash print, so escape them
        print(result["secret"].encode("utf-8", "backslashreplace").decode("utf-8"))
        print("───────────────────────────────────────────────────────\n")
    else:
        print(f"[✗] {result['message']}", file=sys.stderr)
        sys.exit(1)


def cmd_info(args):
    # useful to check before trying to encode a really long message
    result = image_capacity(args.image)
    if result["success"]:
        print(f"\n[i] Image info for '{args.image}':")
        print(f"    Dimensions : {result['width']} × {result['height']} px")
        print(f"    Mode       : {result['mode']}")
        print(f"    Capacity   : {result['capacity_chars']:,} characters")
    else:
        print(f"[✗] {result.get('message', 'Unknown error')}", file=sys.stderr)
        sys.exit(1)


def build_parser():
    parser = argparse.ArgumentParser(
        prog="stegochaos",
        description="StegoChaos — key-scattered LSB steganography CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    # encode needs image, output, key and either -m or -f
    enc = sub.add_parser("encode", help="Hide a message inside an image")
    enc.add_argument("-i", "--image",  required=True, help="Carrier image path")
    text = enc.add_mutually_exclusive_group(required=True)
    text.add_argument("-m", "--message", help="Secret message to hide")
    text.add_argument("-f", "--file",    help="Read the secret message from a UTF-8 text file")
    enc.add_argument("-o", "--output", required=True, help="Output stego-image path (.png)")
    enc.add_argument("-k", "--key",    required=True, help="Secret key (picks the pixels)")

    dec = sub.add_parser("decode", help="Reveal a hidden message from an image")
    dec.add_argument("-i", "--image", required=True, help="Stego-image path")
    dec.add_argument("-k", "--key",   required=True, help="Secret key used when encoding")

    inf = sub.add_parser("info", help="Show image info and steganography capacity")
    inf.add_argument("-i", "--image", required=True, help="Image path")

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # dict routing instead of a big if/elif chain
    dispatch = {"encode": cmd_encode, "decode": cmd_decode, "info": cmd_info}
    dispatch[args.command](args)


if __name__ == "__main__":
    main()
