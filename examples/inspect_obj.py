import argparse
import collections
import pathlib

from objdecode import Severity, load_obj


def format_bytes(size: int) -> str:
    """Format a byte size into a human-readable string."""
    for unit in ["B", "KB", "MB", "GB"]:
        if size < 1024:
            return f"{size:.2f} {unit}"

        size /= 1024

    return f"{size:.2f} TB"


def main() -> None:
    """Inspect an OBJ file and print a summary of its contents."""
    parser = argparse.ArgumentParser(description="Inspect Wavefront OBJ files.")
    parser.add_argument("input", type=pathlib.Path, help="Path to the OBJ file to inspect.")

    args = parser.parse_args()
    if not args.input.exists():
        print(f"Error: File '{args.input}' does not exist.")
        return

    print(f"=== Inspecting: {args.input.name} ===")
    print(f"File Size: {format_bytes(args.input.stat().st_size)}")

    severities: collections.Counter[Severity] = collections.Counter()
    mesh = load_obj(args.input, report=lambda diagnostic: severities.update([diagnostic.severity]))

    print("\n[Diagnostics]")
    print(f"  Errors: {severities[Severity.ERROR]}")
    print(f"  Warnings: {severities[Severity.WARNING]}")

    print("\n[Elements]")
    for element_type, count in sorted(mesh.element_counts.items(), key=lambda item: item[0].keyword):
        print(f"  {element_type.description} ({element_type.keyword}): {count}")

    print("\n[Mesh]")
    print(f"  Vertices: {mesh.num_vertices}")
    print(f"  Triangles: {mesh.num_faces}")
    print(f"  Normals: {'Yes' if mesh.has_normals else 'No'}")
    print(f"  Texture Coordinates: {'Yes' if mesh.has_texture_coords else 'No'}")

    if mesh.num_vertices > 0:
        bounds_min, bounds_max = mesh.bounds()
        dimensions = bounds_max - bounds_min

        print("\n[Dimensions]")
        print(f"  Bounds: {dimensions[0]:.3f} x {dimensions[1]:.3f} x {dimensions[2]:.3f}")


if __name__ == "__main__":
    main()
