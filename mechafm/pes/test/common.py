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


import numpy as np

from molmod import check_delta


__all__ = ['evaluate_interaction', 'check_gradient_interaction', 'get_probe_positions']


def evaluate_interaction(interaction, pos):
    '''Run one interaction on fresh accumulators.'''
    forces = np.zeros(pos.shape, float)
    energies = np.zeros(len(pos), float)
    interaction.eval(pos, forces, energies)
    return forces, energies


def check_gradient_interaction(interaction, pos, scale=1e-4):
    '''Compare the forces of an interaction with finite differences of its
       energy, i.e. the energy of its first particle.'''
    natom = len(pos)
    i = interaction.indexes[0]

    def fn(x, do_gradient=False):
        forces, energies = evaluate_interaction(interaction, x.reshape(natom, 3))
        assert np.isfinite(energies).all()
        if do_gradient:
            assert np.isfinite(forces).all()
            return energies[i], -forces.ravel()
        else:
            return energies[i]

    x = pos.ravel().copy()
    dxs = np.random.normal(0, scale, (100, len(x)))
    check_delta(fn, x, dxs)


def get_probe_positions():
    '''A tip base, a probe particle below it and four sample atoms.'''
    return np.array([
        [0.10, 0.20, 8.00],
        [0.30, 0.10, 4.10],
        [0.00, 0.00, 1.00],
        [1.40, 0.00, 1.10],
        [0.00, 1.40, 0.90],
        [1.40, 1.40, 1.00],
    ])
