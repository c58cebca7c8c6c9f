"""JIT-compiled inner loops shared by the NIST tests. All kernels release the GIL."""

import numpy as np
from numba import jit


@jit(nopython=True, cache=True, nogil=True)
def count_overlapping_patterns(sequence, m):
    """Count every overlapping m-bit pattern, wrapping around the end of the sequence"""
    n = len(sequence)
    counts = np.zeros(2**m, dtype=np.int64)
    if m <= 0 or n == 0:
        return counts

    mask = (1 << m) - 1
    pattern = 0
    for j in range(m):
        pattern = (pattern << 1) | sequence[j % n]
    counts[pattern] += 1

    for i in range(1, n):
        pattern = ((pattern << 1) | sequence[(i + m - 1) % n]) & mask
        counts[pattern] += 1

    return counts


@jit(nopython=True, cache=True, nogil=True)
def longest_runs_per_block(sequence, block_size):
    """Longest run of ones inside each complete block"""
    num_blocks = len(sequence) // block_size
    longest = np.zeros(num_blocks, dtype=np.int64)
    for i in range(num_blocks):
        run = 0
        best = 0
        for j in range(i * block_size, (i + 1) * block_size):
            if sequence[j] == 1:
                run += 1
                if run > best:
                    best = run
            else:
                run = 0
        longest[i] = best
    return longest


@jit(nopython=True, cache=True, nogil=True)
def gf2_rank(matrix):
    """Rank of a binary matrix over GF(2) by row-swap pivoting and XOR reduction"""
    work = matrix.copy()
    rows, cols = work.shape
    rank = 0
    for col in range(cols):
        pivot = -1
        for r in range(rank, rows):
            if work[r, col] == 1:
                pivot = r
                break
        if pivot == -1:
            continue

        if pivot != rank:
            for k in range(cols):
                tmp = work[rank, k]
                work[rank, k] = work[pivot, k]
                work[pivot, k] = tmp

        for r in range(rows):
            if r != rank and work[r, col] == 1:
                for k in range(col, cols):
                    work[r, k] ^= work[rank, k]

        rank += 1
        if rank == rows:
            break
    return rank


@jit(nopython=True, cache=True, nogil=True)
def berlekamp_massey(block):
    """
    Linear complexity of a bit block: the length of the shortest LFSR generating it

    Args:
        block: Array of 0s and 1s

    Returns:
        int: Linear complexity L
    """
    n = len(block)
    if n == 0:
        return 0
    c = np.zeros(n, dtype=np.int8)  # current connection polynomial
    b = np.zeros(n, dtype=np.int8)  # polynomial before the last length change
    c[0] = 1
    b[0] = 1

    L = 0
    m = -1
    for N in range(n):
        d = int(block[N])
        for i in range(1, L + 1):
            d ^= c[i] & block[N - i]

        if d == 1:
            t = c.copy()
            for j in range(n - N + m):
                if b[j] == 1:
                    c[j + N - m] ^= 1

            if L <= N / 2:
                L = N + 1 - L
                m = N
                b = t

    return L


@jit(nopython=True, cache=True, nogil=True)
def universal_log2_distance_sum(values, init_blocks, table_size):
    """Sum of log2 distances to the previous occurrence of each L-bit block after the init segment"""
    last_seen = np.zeros(table_size, dtype=np.int64)

    for i in range(init_blocks):
        last_seen[values[i]] = i + 1

    total = 0.0
    for i in range(init_blocks, len(values)):
        pattern = values[i]
        total += np.log2(i + 1 - last_seen[pattern])
        last_seen[pattern] = i + 1
    return total
