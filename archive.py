# archive.py: unpack svg.zip and locate the "all" folder
import shutil
import zipfile
from pathlib import Path


def extract_archive(zip_path: Path, temp_dir: Path):
    """Extract zip_path into a fresh temp_dir and return the top-level entries."""
    zip_path = Path(zip_path)
    temp_dir = Path(temp_dir)
    print("Extracting svg.zip...")
    if not zip_path.exists():
        print(f"Error: {zip_path} not found. Please place svg.zip in the input directory.")
        raise FileNotFoundError(f"SVG zip file not found: {zip_path}")

    shutil.rmtree(temp_dir, ignore_errors=True)
    temp_dir.mkdir(parents=True)

    with zipfile.ZipFile(zip_path) as zf:
        zf.extractall(temp_dir)
    print("Extraction complete.")

    entries = sorted(p.name for p in temp_dir.iterdir())
    print(f"Extracted {len(entries)} items at root level:")
    print(entries)
    return entries


def find_all_dir(temp_dir: Path):
    """The icons live in all/ or svg/all/ depending on how the zip was made."""
    temp_dir = Path(temp_dir)
    for candidate in (temp_dir / "all", temp_dir / "svg" / "all"):
        if candidate.is_dir():
            sample = sorted(p.name for p in candidate.iterdir())[:5]
            print(f"Found \"all\" directory at {candidate}")
            if sample:
                print(f"Sample filenames: {sample}")
            return candidate
    return None
