# -*- coding: utf-8 -*-
# MechAFM is a mechanical model of an atomic-force-microscope probe
# Copyright (C) 2014 - 2015 The MechAFM developers, all rights reserved unless
# otherwise stated.
#
# This file is part of MechAFM.
#
# MechAFM is free software; you can redistribute it and/or
# modify it under the terms of the GNU General Public License
# as published by the Free Software Foundation; either version 3
# of the License, or (at your option) any later version.
#
# MechAFM is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program; if not, see <http://www.gnu.org/licenses/>
#
#--
'''Regular 3D lattices and precomputed force grids

   A ``DataGrid`` stores one value per node of a regular orthorhombic lattice,
   together with the spacing between the nodes, the position of the first node
   (the origin) and a flag that controls whether out-of-range indexes wrap
   around. It is the container in which tabulated potentials enter the force
   field.

   A ``ForceGrid`` holds two parallel fields on such a lattice: a force vector
   and an energy per node. Forces and energies at arbitrary positions are
   obtained by trilinear interpolation between the eight corners of the
   enclosing cell. This is how the grid-lookup interactions in
   :mod:`mechafm.pes.interactions` evaluate precomputed potentials.
'''


import numpy as np


__all__ = ['DataGrid', 'ForceGrid']


def _check_vector(name, vector, positive=False):
    vector = np.array(vector, dtype=float)
    if vector.shape != (3,):
        raise ValueError('The %s must contain three components.' % name)
    if not np.isfinite(vector).all():
        raise ValueError('The %s must be finite.' % name)
    if positive and (vector <= 0).any():
        raise ValueError('The %s must be strictly positive.' % name)
    return vector


class DataGrid(object):
    '''A dense array of values on a regular 3D lattice.'''
    def __init__(self, values, spacing, origin=None, periodic=False):
        '''
           **Arguments:**

           values
                A three-dimensional array with one value per lattice node,
                indexed as ``values[ix, iy, iz]``.

           spacing
                The distance between two neighboring nodes along x, y and z.

           **Optional arguments:**

           origin
                The position of node (0, 0, 0). Defaults to the Cartesian
                origin.

           periodic
                When set, indexes outside the lattice wrap around.
        '''
        values = np.asarray(values)
        if values.ndim != 3:
            raise ValueError('The values of a data grid must be a 3D array.')
        if values.size == 0:
            raise ValueError('A data grid must contain at least one node.')
        self.values = values
        self.spacing = _check_vector('spacing', spacing, positive=True)
        if origin is None:
            origin = np.zeros(3, float)
        self.origin = _check_vector('origin', origin)
        self.periodic = bool(periodic)

    shape = property(lambda self: self.values.shape)
    size = property(lambda self: self.values.size)

    def _get_extent(self):
        '''The lengths of the periodic box along x, y and z.'''
        return np.array(self.shape)*self.spacing

    extent = property(_get_extent)

    def _get_volume_element(self):
        '''The volume of one lattice cell.'''
        return self.spacing.prod()

    volume_element = property(_get_volume_element)

    def position_at(self, ix, iy, iz):
        '''The Cartesian position of a node, no wrapping is applied.'''
        return self.origin + np.array([ix, iy, iz], float)*self.spacing

    def wrap(self, ix, iy, iz):
        '''Map a (possibly out-of-range) index triplet onto the lattice.

           On a non-periodic lattice, an ``IndexError`` is raised for indexes
           outside the lattice.
        '''
        indexes = (ix, iy, iz)
        if self.periodic:
            return tuple(int(i) % n for i, n in zip(indexes, self.shape))
        for i, n in zip(indexes, self.shape):
            if i < 0 or i >= n:
                raise IndexError('Index %s is outside the non-periodic grid with shape %s.' % (indexes, self.shape))
        return tuple(int(i) for i in indexes)

    def value_at(self, ix, iy, iz):
        return self.values[self.wrap(ix, iy, iz)]


class ForceGrid(object):
    '''Precomputed forces and energies on a regular 3D lattice.

       The arrays are made read-only upon construction: a force grid is shared
       state that is only queried through ``interpolate``.
    '''
    def __init__(self, forces, energies, spacing, origin=None, periodic=True):
        '''
           **Arguments:**

           forces
                An array with shape (nx, ny, nz, 3) with the force vector at
                each node.

           energies
                An array with shape (nx, ny, nz) with the energy at each node.

           spacing
                The distance between two neighboring nodes along x, y and z.

           **Optional arguments:**

           origin
                The position of node (0, 0, 0), also called the offset.

           periodic
                When set (default), positions outside the lattice are wrapped
                back into it. Otherwise they are clamped to the outermost
                cells.
        '''
        forces = np.array(forces, dtype=float)
        energies = np.array(energies, dtype=float)
        if energies.ndim != 3 or energies.size == 0:
            raise ValueError('The energies of a force grid must be a non-empty 3D array.')
        if forces.shape != energies.shape + (3,):
            raise ValueError('The forces must have shape %s, got %s.' % (energies.shape + (3,), forces.shape))
        forces.setflags(write=False)
        energies.setflags(write=False)
        self.forces = forces
        self.energies = energies
        self.spacing = _check_vector('spacing', spacing, positive=True)
        if origin is None:
            origin = np.zeros(3, float)
        self.origin = _check_vector('origin', origin)
        self.periodic = bool(periodic)

    @classmethod
    def from_grids(cls, energy, fx, fy, fz):
        '''Assemble a force grid from four data grids

           **Arguments:**

           energy
                A ``DataGrid`` with the energies. Its spacing, origin and
                periodic flag are used for the force grid.

           fx, fy, fz
                Arrays (or ``DataGrid`` instances) with the Cartesian force
                components on the same lattice.
        '''
        components = [getattr(f, 'values', f) for f in (fx, fy, fz)]
        forces = np.stack(components, axis=-1)
        return cls(forces, energy.values, energy.spacing, energy.origin, energy.periodic)

    shape = property(lambda self: self.energies.shape)

    def _get_extent(self):
        return np.array(self.shape)*self.spacing

    extent = property(_get_extent)

    def _get_corners(self, point):
        '''Return the lower and upper corner indexes and the fractional
           position inside the cell along each axis.
        '''
        frac = (np.asarray(point, float) - self.origin)/self.spacing
        lower = np.floor(frac)
        t = frac - lower
        lower = lower.astype(int)
        shape = np.array(self.shape)
        if self.periodic:
            lower %= shape
            upper = (lower + 1) % shape
        else:
            outside = (lower < 0) | (lower >= shape - 1)
            lower = np.clip(lower, 0, shape - 1)
            upper = np.minimum(lower + 1, shape - 1)
            # Beyond the edges, the value at the nearest boundary node is used.
            t = np.where(outside, (frac >= shape - 1).astype(float), t)
            t = np.where(shape == 1, 0.0, t)
        return lower, upper, t

    def interpolate(self, point):
        '''Trilinear interpolation of the force and energy at a position

           **Arguments:**

           point
                A Cartesian position.

           **Returns:** a tuple ``(force, energy)``, where force is an array
           with three components.
        '''
        if not np.isfinite(point).all():
            raise ValueError('Cannot interpolate at a non-finite position %s.' % (point,))
        lower, upper, t = self._get_corners(point)
        force = np.zeros(3, float)
        energy = 0.0
        for cx in 0, 1:
            ix = upper[0] if cx else lower[0]
            wx = t[0] if cx else 1.0 - t[0]
            for cy in 0, 1:
                iy = upper[1] if cy else lower[1]
                wy = t[1] if cy else 1.0 - t[1]
                for cz in 0, 1:
                    iz = upper[2] if cz else lower[2]
                    wz = t[2] if cz else 1.0 - t[2]
                    w = wx*wy*wz
                    if w == 0.0:
                        continue
                    force += w*self.forces[ix, iy, iz]
                    energy += w*self.energies[ix, iy, iz]
        return force, energy
