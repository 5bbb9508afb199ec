import sqlite3
import sys

DB = sys.argv[1] if len(sys.argv) > 1 else "dev.db"
CATEGORY_ID = sys.argv[2] if len(sys.argv) > 2 else None

conn = sqlite3.connect(DB)
cur = conn.cursor()

print("=== Categories ===")
cur.execute(
    "SELECT c.id, c.name, c.owner_id, COUNT(p.id) FROM categories c "
    "LEFT JOIN products p ON p.category_id = c.id GROUP BY c.id ORDER BY c.id"
)
for r in cur.fetchall():
    print({"id": r[0], "name": r[1], "owner_id": r[2], "products": r[3]})

# ingestion should never leave these behind; direct creates may
print("\n=== Duplicate (title, category_id) pairs ===")
cur.execute(
    "SELECT title, category_id, COUNT(*) FROM products "
    "GROUP BY title, category_id HAVING COUNT(*) > 1 ORDER BY category_id, title"
)
dupes = cur.fetchall()
for r in dupes:
    print({"title": r[0], "category_id": r[1], "rows": r[2]})
if not dupes:
    print("none")

if CATEGORY_ID:
    print(f"\n=== Products for category_id={CATEGORY_ID} ===")
    cur.execute(
        "SELECT id, title, price, stock, updated_at FROM products WHERE category_id=? ORDER BY id LIMIT 50",
        (CATEGORY_ID,),
    )
    for r in cur.fetchall():
        print(r)

conn.close()
