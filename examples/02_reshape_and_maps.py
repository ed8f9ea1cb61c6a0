import numpy as np

from ndsub import IndexingConfig, map_columns, map_rows, pref, reshape, rows, transpose, which

values = np.arange(1, 13)

row_major = reshape(values, (3, -1))
column_major = reshape(values, (3, -1), config=IndexingConfig(order="column"))
print("row-major:\n", row_major)
print("column-major:\n", column_major)
print("transpose:\n", transpose(row_major))

print("row sums:", map_rows(lambda row: row.sum(), row_major))
print("column extremes:\n", map_columns(lambda col: [col.min(), col.max()], row_major))
print("rows:", [row.tolist() for row in rows(column_major)])

# Pointwise lookup: element (0, 3) and element (2, 1)
print("diagonal picks:", pref(row_major, [0, 2], [3, 1]))
print("multiples of three at:", which(lambda v: v % 3 == 0, values))
