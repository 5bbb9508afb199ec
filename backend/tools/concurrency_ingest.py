import os
import sys
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import requests
import concurrent.futures
import argparse
import json

BASE = os.environ.get("CATALOG_BASE", "http://127.0.0.1:8000")

def ingest_task(i, remote_id):
    try:
        r = requests.get(f"{BASE}/fetch-data/{remote_id}", timeout=120)
        return (i, remote_id, r.status_code, r.text)
    except requests.RequestException as e:
        return (i, remote_id, "ERR", str(e))

def count_products(category_id=None):
    params = {"categoryId": category_id} if category_id is not None else {}
    r = requests.get(f"{BASE}/products", params=params, timeout=30)
    r.raise_for_status()
    rows = r.json()
    pairs = [(p["title"], p["category_id"]) for p in rows]
    return len(rows), len(pairs) - len(set(pairs))

def run_ingest_concurrent(workers, remote_ids):
    print(f"Running ingest test: workers={workers}, remote_ids={remote_ids}")
    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as ex:
        futures = [ex.submit(ingest_task, i, remote_ids[i % len(remote_ids)]) for i in range(workers)]
        results = [f.result() for f in futures]
    for r in results:
        print(r[:3], r[3][:200])
    created = sum(json.loads(r[3]).get("products_created", 0) for r in results if r[2] == 200)
    print("Products created across calls:", created)
    total, dupes = count_products()
    # with INGEST_LOCK_ENABLED=false this can go above zero
    print(f"Stored products: {total}, duplicate (title, category_id) rows: {dupes}")

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Fire overlapping /fetch-data calls and report duplicates.")
    parser.add_argument("remote_ids", nargs="+")
    parser.add_argument("--workers", type=int, default=8)
    args = parser.parse_args()
    run_ingest_concurrent(args.workers, args.remote_ids)
