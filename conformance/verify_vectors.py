#!/usr/bin/env python3
"""
verify_vectors.py — auditable verifier for the plutus_data conformance vectors.

Checks:
1) manifest.sha256 integrity (sha256(file-bytes) for each listed artifact)
2) vectors_anchor_sha256 = sha256(manifest.sha256 bytes)
3) vector file shape: unique test_ids, known modes, one expected entry per vector
   and no orphaned expected entries
4) Optional: re-run the Python conformance suite against these vectors

Exit code 0 on success; non-zero on failure.
"""
from __future__ import annotations
import argparse, hashlib, json, os, subprocess, sys
from pathlib import Path

MODES = {"tag": ["variant"], "decode": ["type", "input"]}

def sha256_file(p: Path) -> str:
    return hashlib.sha256(p.read_bytes()).hexdigest()

def die(msg: str) -> None:
    print("FAIL:", msg, file=sys.stderr)
    sys.exit(2)

def parse_manifest(manifest_path: Path):
    lines = manifest_path.read_text(encoding="utf-8").splitlines()
    entries = []
    for ln in lines:
        ln = ln.strip()
        if not ln or ln.startswith("#"):
            continue
        parts = ln.split()
        if len(parts) != 2:
            die(f"bad manifest line: {ln!r}")
        h, rel = parts
        if len(h) != 64:
            die(f"bad sha256 in manifest line: {ln!r}")
        entries.append((h.lower(), rel))
    return entries

def check_shape(vectors: list, expected: dict) -> None:
    seen = set()
    for vec in vectors:
        tid = vec.get("test_id")
        if not isinstance(tid, str) or not tid:
            die(f"vector without test_id: {vec!r}")
        if tid in seen:
            die(f"duplicate test_id: {tid}")
        seen.add(tid)
        mode = vec.get("mode")
        if mode not in MODES:
            die(f"{tid}: unknown mode {mode!r}")
        for field in MODES[mode]:
            if field not in vec:
                die(f"{tid}: mode {mode} requires field {field!r}")
        exp = expected.get(tid)
        if not isinstance(exp, dict) or len(exp) == 0:
            die(f"{tid}: no expected entry")
        if "err" in exp and len(exp) != 1:
            die(f"{tid}: expected err entry carries extra keys")
    orphans = sorted(set(expected) - seen)
    if orphans:
        die(f"expected entries without vectors: {orphans}")

def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--dir", default=os.path.dirname(os.path.abspath(__file__)),
                    help="conformance directory")
    ap.add_argument("--rerun", action="store_true", help="re-run the Python conformance suite")
    args = ap.parse_args()

    root = Path(args.dir).resolve()
    manifest = root / "manifest.sha256"
    if not manifest.exists():
        die("manifest.sha256 missing")

    entries = parse_manifest(manifest)

    # 1) manifest integrity
    for expected_hash, rel in entries:
        p = root / rel
        if not p.exists():
            die(f"manifest references missing file: {rel}")
        got = sha256_file(p)
        if got != expected_hash:
            die(f"hash mismatch for {rel}: got {got} expected {expected_hash}")

    listed = {rel for _, rel in entries}
    for name in ["conformance_vectors.json", "conformance_expected.json"]:
        if name not in listed:
            die(f"manifest does not list {name}")

    # 2) anchor hash (manifest does not list itself)
    anchor = hashlib.sha256(manifest.read_bytes()).hexdigest()
    print("vectors_anchor_sha256 =", anchor)

    # 3) shape
    vectors = json.loads((root / "conformance_vectors.json").read_text(encoding="utf-8"))["vectors"]
    expected = json.loads((root / "conformance_expected.json").read_text(encoding="utf-8"))["expected"]
    check_shape(vectors, expected)
    print(f"vectors: {len(vectors)}")

    # 4) Optional rerun
    if args.rerun:
        runner = root.parent / "implementations" / "python" / "tests" / "test_conformance.py"
        cmd = [sys.executable, str(runner), "--vectors-dir", str(root)]
        subprocess.check_call(cmd)

    print("OK")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
