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
'''Interaction kernels of the probe-particle force field

   Each ``Interaction`` instance acts on a fixed set of particles, identified
   by their indexes in the position array, and holds a few parameters that are
   fixed at construction. The ``eval`` method **adds** the forces and energies
   of the interaction to the accumulators it receives. It never overwrites
   them, because several interactions usually act on the same particle, and it
   does not keep any state between calls.

   Energy accounting: the full energy of an interaction is added to the energy
   accumulator of every particle it acts on. Summing the per-particle energies
   therefore counts a pair energy twice, an angle energy three times and a
   dihedral energy four times. The per-particle energy of the probe is the
   quantity of interest in a scan.

   The set of kernels is closed. The ``kind`` class attribute is a short tag
   that identifies the kernel in log output and error messages.

   Numerical safety: whenever a force requires a division by a derived length
   (or by the sine of an angle) that is smaller than ``TOLERANCE``, the force
   contribution is left at zero. Potentials that are singular at such a
   configuration also skip the energy contribution.
'''


import operator

import numpy as np

from mechafm.pes.esgrid import build_electrostatic_force_grid
from mechafm.pes.grid import ForceGrid


__all__ = [
    'TOLERANCE', 'clip_cos', 'Interaction', 'LennardJones', 'Morse',
    'Coulomb', 'Harmonic', 'HarmonicAngle', 'HarmonicDihedral', 'TipHarmonic',
    'XYHarmonic', 'Substrate', 'GridInteraction', 'ElectrostaticInteraction',
]


TOLERANCE = 1e-10


def clip_cos(value):
    '''Clamp a cosine into [-1, 1] to absorb round-off errors.'''
    if value > 1.0:
        return 1.0
    elif value < -1.0:
        return -1.0
    return value


def _add_pair(forces, energies, i0, i1, f, e):
    energies[i0] += e
    energies[i1] += e
    forces[i0] += f
    forces[i1] -= f


class Interaction(object):
    '''Base class for all interaction kernels.'''
    kind = None

    def __init__(self, indexes, pars):
        '''
           **Arguments:**

           indexes
                The indexes of the particles on which this interaction acts.

           pars
                A list with the numerical parameters, only used for logging.
        '''
        self.indexes = tuple(operator.index(i) for i in indexes)
        for i in self.indexes:
            if i < 0:
                raise ValueError('Particle indexes must not be negative, got %s.' % (self.indexes,))
        self.pars = [float(p) for p in pars]

    def eval(self, pos, forces, energies):
        '''Add the forces and energies of this interaction

           **Arguments:**

           pos
                An array with shape (N, 3) with the particle positions.

           forces
                An array with shape (N, 3). The forces on the particles are
                added to it.

           energies
                An array with shape (N,). The energy of the interaction is
                added to the entry of every particle involved.
        '''
        raise NotImplementedError

    def get_log(self):
        '''A short description for screen logging.'''
        return '%s%s(%s)' % (
            self.__class__.__name__,
            list(self.indexes),
            ','.join('%.5e' % p for p in self.pars),
        )


class LennardJones(Interaction):
    '''Lennard-Jones pair: es12/r^12 - es6/r^6'''
    kind = 'lj'

    def __init__(self, i0, i1, es12, es6):
        '''
           **Arguments:**

           i0, i1
                The two particles.

           es12, es6
                The coefficients of the repulsive and attractive terms.
        '''
        Interaction.__init__(self, [i0, i1], [es12, es6])
        self.es12 = float(es12)
        self.es6 = float(es6)

    @classmethod
    def from_epsilon_sigma(cls, i0, i1, epsilon, sigma):
        '''Construct from the well depth and the zero-crossing distance.'''
        return cls(i0, i1, 4*epsilon*sigma**12, 4*epsilon*sigma**6)

    def eval(self, pos, forces, energies):
        i0, i1 = self.indexes
        delta = pos[i0] - pos[i1]
        rsq = np.dot(delta, delta)
        if rsq < TOLERANCE**2:
            return
        r6 = rsq*rsq*rsq
        term_a = self.es12/(r6*r6)
        term_b = self.es6/r6
        f = (12*term_a - 6*term_b)/rsq*delta
        _add_pair(forces, energies, i0, i1, f, term_a - term_b)


class Morse(Interaction):
    '''Morse pair: de*(exp(-2a(r-re)) - 2*exp(-a(r-re)) + 1)'''
    kind = 'morse'

    def __init__(self, i0, i1, de, a, re):
        Interaction.__init__(self, [i0, i1], [de, a, re])
        self.de = float(de)
        self.a = float(a)
        self.re = float(re)

    def eval(self, pos, forces, energies):
        i0, i1 = self.indexes
        delta = pos[i0] - pos[i1]
        r = np.linalg.norm(delta)
        d_exp = np.exp(-self.a*(r - self.re))
        e = self.de*(d_exp*d_exp - 2*d_exp + 1)
        if r > TOLERANCE:
            f = 2*self.de*self.a*(d_exp*d_exp - d_exp)/r*delta
        else:
            f = np.zeros(3, float)
        _add_pair(forces, energies, i0, i1, f, e)


class Coulomb(Interaction):
    '''Point-charge pair: qq/r'''
    kind = 'coulomb'

    def __init__(self, i0, i1, qq):
        '''
           **Arguments:**

           i0, i1
                The two particles.

           qq
                The product of both charges, including the Coulomb constant of
                the unit system.
        '''
        Interaction.__init__(self, [i0, i1], [qq])
        self.qq = float(qq)

    def eval(self, pos, forces, energies):
        i0, i1 = self.indexes
        delta = pos[i0] - pos[i1]
        r = np.linalg.norm(delta)
        if r < TOLERANCE:
            return
        _add_pair(forces, energies, i0, i1, self.qq/(r*r*r)*delta, self.qq/r)


class Harmonic(Interaction):
    '''Harmonic bond: k*(r-r0)^2'''
    kind = 'harmonic'

    def __init__(self, i0, i1, k, r0):
        Interaction.__init__(self, [i0, i1], [k, r0])
        self.k = float(k)
        self.r0 = float(r0)

    def eval(self, pos, forces, energies):
        i0, i1 = self.indexes
        delta = pos[i0] - pos[i1]
        r = np.linalg.norm(delta)
        dr = r - self.r0
        if r > TOLERANCE:
            f = -2*self.k*dr/r*delta
        else:
            f = np.zeros(3, float)
        _add_pair(forces, energies, i0, i1, f, self.k*dr*dr)


class HarmonicAngle(Interaction):
    '''Harmonic bending angle: k*(theta-theta0)^2

       The angle is spanned at the shared particle, between the vectors
       pointing to the two outer particles.
    '''
    kind = 'angle'

    def __init__(self, i0, shared, i1, k, theta0):
        '''
           **Arguments:**

           i0, shared, i1
                The first outer particle, the particle at the apex of the
                angle and the second outer particle.

           k
                The force constant.

           theta0
                The rest angle in radians.
        '''
        Interaction.__init__(self, [i0, shared, i1], [k, theta0])
        self.k = float(k)
        self.theta0 = float(theta0)

    def eval(self, pos, forces, energies):
        i0, shared, i1 = self.indexes
        delta1 = pos[i0] - pos[shared]
        delta2 = pos[i1] - pos[shared]
        r1 = np.linalg.norm(delta1)
        r2 = np.linalg.norm(delta2)
        if r1 < TOLERANCE or r2 < TOLERANCE:
            return
        cos_t = clip_cos(np.dot(delta1, delta2)/(r1*r2))
        theta = np.arccos(cos_t)
        sin_t = np.sin(theta)
        d_theta = theta - self.theta0
        e = self.k*d_theta*d_theta
        energies[i0] += e
        energies[shared] += e
        energies[i1] += e
        if sin_t < TOLERANCE:
            return
        f_multiplier = -2*self.k*d_theta/sin_t
        f1 = -f_multiplier/r1*(delta2/r2 - delta1*cos_t/r1)
        f2 = -f_multiplier/r2*(delta1/r1 - delta2*cos_t/r2)
        forces[i0] += f1
        forces[i1] += f2
        forces[shared] -= f1 + f2


class HarmonicDihedral(Interaction):
    '''Harmonic dihedral: k*(sigma-sigma0)^2

       The dihedral is computed from the three bond vectors r12 = p0 - p1,
       r23 = p1 - p2 and r43 = p3 - p2, and the normals m = r12 x r23 and
       n = r43 x r23, as::

           sigma = arctan((n . r12)*|r23| / (m . n))

       Because only the arctangent of the ratio is used, sigma always lies in
       [-pi/2, pi/2]: dihedrals beyond 90 degrees are folded back. For
       p0=(1,0,0), p1=(0,0,0), p2=(0,0,1), p3=(cos(phi),sin(phi),1) with
       |phi| < pi/2, sigma equals -phi.
    '''
    kind = 'dihedral'

    def __init__(self, i0, i1, i2, i3, k, sigma0):
        Interaction.__init__(self, [i0, i1, i2, i3], [k, sigma0])
        self.k = float(k)
        self.sigma0 = float(sigma0)

    def eval(self, pos, forces, energies):
        i0, i1, i2, i3 = self.indexes
        r12 = pos[i0] - pos[i1]
        r23 = pos[i1] - pos[i2]
        r43 = pos[i3] - pos[i2]
        r23_norm = np.linalg.norm(r23)
        m_vec = np.cross(r12, r23)
        n_vec = np.cross(r43, r23)
        m = np.linalg.norm(m_vec)
        n = np.linalg.norm(n_vec)
        if r23_norm < TOLERANCE or m < TOLERANCE or n < TOLERANCE:
            return
        num = np.dot(n_vec, r12)*r23_norm
        den = np.dot(m_vec, n_vec)
        if den == 0.0:
            sigma = np.copysign(0.5*np.pi, num)
        else:
            sigma = np.arctan(num/den)
        d_sigma = sigma - self.sigma0
        f_multiplier = 2*self.k*d_sigma
        dot12 = np.dot(r12, r23)
        dot43 = np.dot(r43, r23)
        rsq23 = r23_norm*r23_norm
        f1 = -f_multiplier*r23_norm/(m*m)*m_vec
        f2 = -f_multiplier*(dot43/(n*n*r23_norm)*n_vec - (rsq23 + dot12)/(m*m*r23_norm)*m_vec)
        f3 = -f_multiplier*(dot12/(m*m*r23_norm)*m_vec + (rsq23 - dot43)/(n*n*r23_norm)*n_vec)
        f4 = f_multiplier*r23_norm/(n*n)*n_vec
        e = self.k*d_sigma*d_sigma
        for i, f in zip(self.indexes, (f1, f2, f3, f4)):
            forces[i] += f
            energies[i] += e


class TipHarmonic(Interaction):
    '''Planar harmonic restraint between two particles: k*(d-r0)^2

       Only the separation in the xy plane is restrained, the z components
       of the forces are zero.
    '''
    kind = 'tip'

    def __init__(self, i0, i1, k, r0):
        Interaction.__init__(self, [i0, i1], [k, r0])
        self.k = float(k)
        self.r0 = float(r0)

    def eval(self, pos, forces, energies):
        i0, i1 = self.indexes
        delta = pos[i0] - pos[i1]
        delta[2] = 0.0
        r = np.linalg.norm(delta)
        dr = r - self.r0
        if r > TOLERANCE:
            f = -2*self.k*dr/r*delta
        else:
            f = np.zeros(3, float)
        _add_pair(forces, energies, i0, i1, f, self.k*dr*dr)


class XYHarmonic(Interaction):
    '''Planar harmonic anchor of one particle to a fixed point: k*d^2

       The distance d is measured in the xy plane, from (x0, y0).
    '''
    kind = 'xy'

    def __init__(self, i, x0, y0, k):
        Interaction.__init__(self, [i], [x0, y0, k])
        self.p0 = np.array([x0, y0], float)
        self.k = float(k)

    def eval(self, pos, forces, energies):
        i, = self.indexes
        delta = pos[i, :2] - self.p0
        energies[i] += self.k*np.dot(delta, delta)
        forces[i, :2] -= 2*self.k*delta


class Substrate(Interaction):
    '''Smooth 10-4 wall that models the substrate below the sample

       With s = sigma/dz and dz the height above the wall plane z0, the energy
       for dz <= rc is::

           multiplier*(2/5*s^10 - s^4) + ulj*dz^2 - ushift

       and zero beyond. The correction coefficients ulj and ushift make both
       the force and the energy vanish at rc. The force only has a z
       component.
    '''
    kind = 'substrate'

    def __init__(self, i, z0, sigma, multiplier, rc):
        '''
           **Arguments:**

           i
                The particle that feels the wall.

           z0
                The height of the wall plane.

           sigma
                The length scale of the wall potential.

           multiplier
                The energy prefactor of the wall potential.

           rc
                The cutoff height above the wall plane.
        '''
        if not rc > 0:
            raise ValueError('The substrate cutoff must be positive, got %s.' % rc)
        Interaction.__init__(self, [i], [z0, sigma, multiplier, rc])
        self.z0 = float(z0)
        self.sigma = float(sigma)
        self.multiplier = float(multiplier)
        self.rc = float(rc)
        s2 = (self.sigma/self.rc)**2
        s4 = s2*s2
        s10 = s4*s4*s2
        self.ulj = 2*self.multiplier*(s10 - s4)/self.rc**2
        self.ushift = self.multiplier*(0.4*s10 - s4) + self.ulj*self.rc**2

    @classmethod
    def from_lj(cls, i, z0, sigma, epsilon, density, rc):
        '''Wall obtained by integrating Lennard-Jones interactions over a
           plane with the given areal density.
        '''
        return cls(i, z0, sigma, 2*np.pi*epsilon*density*sigma**2, rc)

    def eval(self, pos, forces, energies):
        i, = self.indexes
        dz = pos[i, 2] - self.z0
        if dz > self.rc or abs(dz) < TOLERANCE:
            return
        s2 = (self.sigma/dz)**2
        s4 = s2*s2
        s10 = s4*s4*s2
        energies[i] += self.multiplier*(0.4*s10 - s4) + self.ulj*dz*dz - self.ushift
        forces[i, 2] += 4*self.multiplier/dz*(s10 - s4) - 2*self.ulj*dz


class GridInteraction(Interaction):
    '''Force and energy interpolated from a precomputed force grid.'''
    kind = 'grid'

    def __init__(self, i, force_grid):
        '''
           **Arguments:**

           i
                The particle that feels the grid, usually the probe.

           force_grid
                A ``ForceGrid`` instance.
        '''
        if not isinstance(force_grid, ForceGrid):
            raise TypeError('The force_grid argument must be a ForceGrid instance.')
        Interaction.__init__(self, [i], [])
        self.force_grid = force_grid

    def eval(self, pos, forces, energies):
        i, = self.indexes
        force, energy = self.force_grid.interpolate(pos[i])
        forces[i] += force
        energies[i] += energy

    def get_log(self):
        return '%s[%i](shape=%s)' % (self.__class__.__name__, self.indexes[0], self.force_grid.shape)


class ElectrostaticInteraction(GridInteraction):
    '''Electrostatic interaction of the charged probe with the sample

       The force grid is computed once, upon construction, by
       :func:`mechafm.pes.esgrid.build_electrostatic_force_grid`.
    '''
    kind = 'electrostatic'

    def __init__(self, i, potential, tip_charge, gaussian_width, report_charge=False):
        '''
           **Arguments:**

           i
                The particle that carries the tip charge.

           potential
                A ``DataGrid`` with the tabulated electrostatic potential.

           tip_charge
                The charge of the probe.

           gaussian_width
                The width of the Gaussian charge cloud of the probe.

           **Optional arguments:**

           report_charge
                Log the integrated charge of the sampled cloud.
        '''
        force_grid = build_electrostatic_force_grid(potential, tip_charge, gaussian_width, report_charge)
        GridInteraction.__init__(self, i, force_grid)
        self.tip_charge = float(tip_charge)
        self.gaussian_width = float(gaussian_width)
        self.pars = [self.tip_charge, self.gaussian_width]
