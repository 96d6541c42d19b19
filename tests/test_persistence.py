from pathlib import Path

from zone_engine.persistence.filesystem import FileStorage


def test_file_storage_creates_run_directory(tmp_path: Path) -> None:
    storage = FileStorage(root=tmp_path)
    run_dir = storage.make_run_directory(prefix="zones_test")

    assert run_dir.exists()
    assert run_dir.is_dir()
    assert run_dir.parent == tmp_path.resolve() / "outputs"


def test_file_storage_writes_json_and_csv(tmp_path: Path) -> None:
    storage = FileStorage(root=tmp_path)
    run_dir = storage.make_run_directory(prefix="zones_test")

    summary_path = run_dir / "summary.json"
    zones_path = run_dir / "zones.csv"

    storage.write_json(summary_path, {"zone": "Siliguri"})
    storage.write_csv(zones_path, "zone_code,state,city\nNE1,West Bengal,Siliguri\n")

    assert summary_path.read_text(encoding="utf-8") == '{\n  "zone": "Siliguri"\n}'
    assert zones_path.read_text(encoding="utf-8") == "zone_code,state,city\nNE1,West Bengal,Siliguri\n"
