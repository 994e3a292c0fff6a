from dupehash.core.models import HashAlgorithmName

ALGORITHM_ALIASES = {
    "sha512": HashAlgorithmName.SHA512,
    "sha256": HashAlgorithmName.SHA256,
    "blake2b": HashAlgorithmName.BLAKE2B,
    "xxh64": HashAlgorithmName.XXH64,
    "xxh128": HashAlgorithmName.XXH128,
}

ALGORITHM_CHOICES = list(ALGORITHM_ALIASES.keys())

ALGORITHM_HELP_TEXT = (
    "Primary digest used to fingerprint file content:\n"
    "  sha512  : SHA-512 (default)\n"
    "  sha256  : SHA-256\n"
    "  blake2b : BLAKE2b\n"
    "  xxh64   : xxHash64 (fast, non-cryptographic)\n"
    "  xxh128  : xxHash128 (fast, non-cryptographic)\n"
    "Example: %(prog)s -p ~/Downloads --algorithm xxh128 -j 4\n"
)

EPILOG_TEXT = """
Examples:
  Summary of duplicates under the current directory
  %(prog)s

  List every group of duplicates in Downloads, ignoring files under 1KB
  %(prog)s -p ~/Downloads -b 1K -L

  Same as above, with 4 workers and an extra MD5 digest per file
  %(prog)s -p ~/Downloads -b 1K -L -j 4 --thorough

  Machine-readable listing only (one quoted group per line)
  %(prog)s -p ~/Downloads -L -q > ~/Downloads/dupes.txt
"""
