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
'''Force field evaluation

   The ``ForceField`` class is a container for ``Interaction`` objects (see
   :mod:`mechafm.pes.interactions`). Its ``evaluate`` method walks over all
   interactions and lets each of them add its forces and energies to the
   accumulators supplied by the caller, usually a minimizer that relaxes the
   probe at one scan point. The contributions are purely additive, so the
   order of the interactions does not matter.

   An evaluation does not keep any state: calling it twice with the same
   positions on freshly zeroed accumulators gives identical results. One
   ``ForceField`` instance should be used by one worker at a time.
'''


import numpy as np

from mechafm.log import log, timer
from mechafm.pes.interactions import Interaction


__all__ = ['InteractionError', 'ForceField']


class InteractionError(ValueError):
    '''Raised when an interaction produces a non-finite force or energy, or
       when its evaluation fails with a floating point error.

       The ``kind`` and ``indexes`` attributes identify the interaction, such
       that the caller can skip or retry the scan point.
    '''
    def __init__(self, kind, indexes, message):
        ValueError.__init__(self, 'Interaction %s%s: %s' % (kind, list(indexes), message))
        self.kind = kind
        self.indexes = tuple(indexes)


class ForceField(object):
    '''A complete set of interactions acting on N particles.'''
    def __init__(self, natom, interactions=()):
        """
           **Arguments:**

           natom
                The number of particles. All position, force and energy arrays
                passed to this force field must have this length.

           **Optional arguments:**

           interactions
                A list of ``Interaction`` instances.
        """
        if natom <= 0:
            raise ValueError('A force field needs at least one particle.')
        self.natom = natom
        self.interactions = []
        for interaction in interactions:
            self.add_interaction(interaction)
        if log.do_medium:
            with log.section('FFINIT'):
                log('Force field with %i particles and %i interactions.' % (
                    self.natom, len(self.interactions)
                ))

    def __len__(self):
        return len(self.interactions)

    def __iter__(self):
        return iter(self.interactions)

    def add_interaction(self, interaction):
        '''Register a new interaction.

           **Arguments:**

           interaction
                An instance of a subclass of ``Interaction``.
        '''
        if not isinstance(interaction, Interaction):
            raise TypeError('Expecting an Interaction instance, got %s.' % type(interaction))
        if max(interaction.indexes) >= self.natom:
            raise ValueError('Interaction %s acts on particles %s, but the force field only has %i particles.' % (
                interaction.kind, list(interaction.indexes), self.natom))
        if log.do_high:
            with log.section('ITERM'):
                log('%7i&%s' % (len(self.interactions), interaction.get_log()))
        self.interactions.append(interaction)

    def _check_shape(self, name, array, shape):
        if array.shape != shape:
            raise ValueError('The %s array must have shape %s, got %s.' % (name, shape, array.shape))

    def evaluate(self, pos, forces, energies):
        '''Add the forces and energies of all interactions

           **Arguments:**

           pos
                An array with shape (N, 3) with the particle positions.

           forces
                A writeable array with shape (N, 3).

           energies
                A writeable array with shape (N,).

           The results are **added** to the current contents of forces and
           energies. The caller is responsible for zeroing them first.
           Floating point errors and non-finite results of an interaction are
           reported as an ``InteractionError``.
        '''
        pos = np.asarray(pos, float)
        self._check_shape('pos', pos, (self.natom, 3))
        self._check_shape('forces', forces, (self.natom, 3))
        self._check_shape('energies', energies, (self.natom,))
        with timer.section('Evaluate'):
            for interaction in self.interactions:
                try:
                    interaction.eval(pos, forces, energies)
                except (FloatingPointError, ValueError) as e:
                    raise InteractionError(interaction.kind, interaction.indexes, str(e))
                rows = list(interaction.indexes)
                if not np.isfinite(energies[rows]).all():
                    raise InteractionError(interaction.kind, interaction.indexes, 'the energy is not finite.')
                if not np.isfinite(forces[rows]).all():
                    raise InteractionError(interaction.kind, interaction.indexes, 'the force is not finite.')

    def compute(self, pos):
        '''Evaluate all interactions on fresh accumulators

           **Arguments:**

           pos
                An array with shape (N, 3) with the particle positions.

           **Returns:** a tuple ``(forces, energies)``.
        '''
        forces = np.zeros((self.natom, 3), float)
        energies = np.zeros(self.natom, float)
        self.evaluate(pos, forces, energies)
        return forces, energies
