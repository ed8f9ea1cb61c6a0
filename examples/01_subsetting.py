import numpy as np

from ndsub import ALL, assign, cat, dims, rev, rng, sub

grid = np.arange(20).reshape(4, 5)
print("grid", dims(grid))
print(grid)

# Drop the first axis by addressing a single row
print("row 1:", sub(grid, 1, ALL))

# Interior block: end positions count from the end of each axis
print("interior:")
print(sub(grid, rng(1, -1), rng(1, -1)))

# Rows upside down, columns reordered
print("reordered:")
print(sub(grid, rev(ALL), cat([4], rng(0, 2))))

# The same selection written as text
print("parsed:")
print(sub(grid, "rev(*)", "cat([4], 0:2)"))

# Broadcast a scalar, then copy a block back in reverse
assign(grid, 0, rng(0, 0, 2), ALL)
assign(grid, sub(grid, rev(ALL), ALL), ALL, ALL)
print("after assignment:")
print(grid)

letters = list("abcdefg")
assign(letters, ["X", "Y"], [0, -1])
print(sub(letters, rev(rng(0, 0, 2))), letters)
