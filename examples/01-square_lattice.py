#! /usr/bin/env python

import numpy as np

import hopblocks as hb


# In this tutorial we build the Hamiltonian of a square lattice with periodic
# boundary conditions. Sites are indexed as i = ix * ny + iy.
nx, ny = 4, 3
num_sites = nx * ny
ix, iy = np.divmod(np.arange(num_sites), ny)

# Each hopping family is a template of relative cell index and energy. Only
# half of the hopping terms are needed, the conjugate ones are restored when
# building the Hamiltonian.
families = [((1, 0), -1.0), ((0, 1), -1.0), ((1, 1), -0.2)]

# Create the blocks and reserve space for all the hopping terms at once.
hop_blocks = hb.HoppingBlocks(num_sites, len(families))
hop_blocks.reserve([num_sites] * len(families))

# Resolve the templates against all the sites, wrapping around the boundaries,
# and append the hopping terms of each family in bulk.
for family_id, ((dx, dy), _) in enumerate(families):
    cols = ((ix + dx) % nx) * ny + (iy + dy) % ny
    hop_blocks.append(family_id, np.arange(num_sites), cols)
hop_blocks.report()

# The CSR matrix holds the family ids as data.
csr = hop_blocks.to_csr()
print(csr.indptr)
print(csr.indices)
print(csr.data)

# Replace family ids with energies to get the Hamiltonian.
hop_eng = [energy for _, energy in families]
ham = hop_blocks.build_ham_csr(hop_eng, hermitian=True)
print(ham.toarray().real)
