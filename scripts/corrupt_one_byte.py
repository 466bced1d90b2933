import sys
from pathlib import Path

def main():
    if len(sys.argv) != 2:
        print("Usage: corrupt_one_byte.py <file>")
        raise SystemExit(2)

    p = Path(sys.argv[1])
    b = bytearray(p.read_bytes())
    if len(b) < 6:
        print("File too small to corrupt safely.")
        raise SystemExit(2)

    # File magic is 4 bytes, followed by the low 16 bits of the file size.
    # We flip the low byte of the size field so the header no longer matches.
    idx = 4
    b[idx] ^= 0x01
    p.write_bytes(bytes(b))
    print(f"Corrupted 1 byte at offset {idx} in {p}")

if __name__ == "__main__":
    main()
