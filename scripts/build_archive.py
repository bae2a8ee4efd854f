# scripts/build_archive.py
import sys
import zipfile
from pathlib import Path

# Add the parent directory to the Python path properly
current_dir = Path(__file__).resolve().parent
project_dir = current_dir.parent
sys.path.insert(0, str(project_dir))

from config import Config
from corpus import SCRIPTURE_FILES, ScriptureStore


def build_archive(source_dir, output_path):
    """Bundle the scripture JSON documents of source_dir into one zip archive."""
    source_dir = Path(source_dir)
    documents = []
    for filename in SCRIPTURE_FILES:
        path = source_dir / filename
        if not path.is_file():
            print(f"Warning: {path} not found; skipping")
            continue
        documents.append((filename, path.read_bytes()))

    if not documents:
        print(f"No scripture documents found in {source_dir}")
        return False

    # Refuse to package documents the loader would reject
    store = ScriptureStore()
    rejected = [label for label, raw in documents if not store.add_document(label, raw)]
    if rejected:
        print(f"Not building archive; could not parse: {', '.join(rejected)}")
        return False

    with zipfile.ZipFile(output_path, 'w', compression=zipfile.ZIP_DEFLATED, compresslevel=9) as archive:
        for filename, raw in documents:
            archive.writestr(filename, raw)

    stats = store.seal().stats()
    print(f"Wrote {output_path}: {len(documents)} documents, {stats['books']} books, {stats['verses']} verses")
    return True


if __name__ == '__main__':
    if len(sys.argv) not in (2, 3):
        print("Usage: python build_archive.py <source_dir> [<output_zip>]")
        sys.exit(1)

    source = sys.argv[1]
    output = sys.argv[2] if len(sys.argv) == 3 else str(Path(Config.BUNDLED_DATA_DIR) / Config.ARCHIVE_NAME)
    sys.exit(0 if build_archive(source, output) else 1)
