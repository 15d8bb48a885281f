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
import pytest

from mechafm import *
from mechafm.pes.test.common import evaluate_interaction, \
    check_gradient_interaction, get_probe_positions


def get_pair_pos():
    return np.array([[0.1, -0.3, 0.2], [1.2, 0.4, -0.5]])


def get_dihedral_pos(phi):
    return np.array([
        [1.0, 0.0, 0.0],
        [0.0, 0.0, 0.0],
        [0.0, 0.0, 1.0],
        [np.cos(phi), np.sin(phi), 1.0],
    ])


def get_pair_interactions():
    return [
        LennardJones(0, 1, 2.1, 1.3),
        Morse(0, 1, 0.5, 1.7, 1.1),
        Coulomb(0, 1, -0.8),
        Harmonic(0, 1, 3.0, 1.0),
        TipHarmonic(0, 1, 0.7, 0.4),
    ]


#
# Reference values
#


def test_lj_reference():
    pos = np.array([[0.0, 0.0, 0.0], [0.6, 0.8, 0.0]])
    forces, energies = evaluate_interaction(LennardJones(0, 1, 1.0, 1.0), pos)
    assert abs(energies).max() < 1e-12
    assert abs(np.linalg.norm(forces[0]) - 6.0) < 1e-12
    # repulsive: the first particle is pushed away from the second
    assert abs(forces[0] - 6.0*(pos[0] - pos[1])).max() < 1e-12


def test_lj_from_epsilon_sigma():
    epsilon, sigma = 0.3, 2.5
    lj = LennardJones.from_epsilon_sigma(0, 1, epsilon, sigma)
    assert abs(lj.es12 - 4*epsilon*sigma**12) < 1e-8*lj.es12
    assert abs(lj.es6 - 4*epsilon*sigma**6) < 1e-8*lj.es6
    pos = np.array([[0.0, 0.0, 0.0], [0.0, 0.0, sigma]])
    forces, energies = evaluate_interaction(lj, pos)
    assert abs(energies).max() < 1e-12
    pos[1, 2] = 2**(1.0/6.0)*sigma
    forces, energies = evaluate_interaction(lj, pos)
    assert abs(energies + epsilon).max() < 1e-12
    assert abs(forces).max() < 1e-12


def test_coulomb_reference():
    pos = np.array([[0.0, 0.0, 0.0], [0.0, 0.0, 1.0]])
    forces, energies = evaluate_interaction(Coulomb(0, 1, 1.0), pos)
    assert abs(energies - 1.0).max() < 1e-15
    assert abs(forces[0] - (pos[0] - pos[1])).max() < 1e-15
    assert abs(forces[1] - (pos[1] - pos[0])).max() < 1e-15


def test_harmonic_rest_and_displaced():
    k, r0, delta = 2.5, 1.3, 0.01
    pos = np.array([[0.0, 0.0, 0.0], [0.0, r0, 0.0]])
    forces, energies = evaluate_interaction(Harmonic(0, 1, k, r0), pos)
    assert abs(forces).max() < 1e-14
    assert abs(energies).max() < 1e-28
    pos[1, 1] += delta
    forces, energies = evaluate_interaction(Harmonic(0, 1, k, r0), pos)
    assert abs(energies - k*delta**2).max() < 1e-14
    # the stretched bond pulls the first particle towards the second
    assert abs(forces[0] - [0.0, 2*k*delta, 0.0]).max() < 1e-12


def test_morse_minimum_and_dissociation():
    morse = Morse(0, 1, 0.5, 1.7, 1.1)
    pos = np.array([[0.0, 0.0, 0.0], [1.1, 0.0, 0.0]])
    forces, energies = evaluate_interaction(morse, pos)
    assert abs(energies).max() < 1e-15
    assert abs(forces).max() < 1e-15
    pos[1, 0] = 50.0
    forces, energies = evaluate_interaction(morse, pos)
    assert abs(energies - 0.5).max() < 1e-12
    assert abs(forces).max() < 1e-12


def test_angle_right_angle():
    pos = np.array([[1.0, 0.0, 0.0], [0.0, 0.0, 0.0], [0.0, 2.0, 0.0]])
    forces, energies = evaluate_interaction(HarmonicAngle(0, 1, 2, 1.5, 0.5*np.pi), pos)
    assert abs(energies).max() < 1e-15
    assert abs(forces).max() < 1e-15
    forces, energies = evaluate_interaction(HarmonicAngle(0, 1, 2, 1.5, 0.25*np.pi), pos)
    assert abs(energies - 1.5*(0.25*np.pi)**2).max() < 1e-12
    # the angle is too wide: the outer particles are pushed towards each other
    assert forces[0, 1] > 0
    assert forces[2, 0] > 0


def test_clip_cos():
    assert clip_cos(1.0000001) == 1.0
    assert clip_cos(-1.0000001) == -1.0
    assert clip_cos(0.3) == 0.3
    assert np.arccos(clip_cos(1.0000001)) == 0.0


def test_angle_collinear():
    k, theta0 = 1.2, 1.9
    # both arms point in the same direction, theta = 0
    pos = np.array([[1.0, 0.0, 0.0], [0.0, 0.0, 0.0], [2.0, 0.0, 0.0]])
    forces, energies = evaluate_interaction(HarmonicAngle(0, 1, 2, k, theta0), pos)
    assert np.isfinite(forces).all()
    assert abs(forces).max() == 0.0
    assert abs(energies - k*theta0**2).max() < 1e-12
    # straight angle, theta = pi
    pos = np.array([[1.0, 0.0, 0.0], [0.0, 0.0, 0.0], [-2.0, 0.0, 0.0]])
    forces, energies = evaluate_interaction(HarmonicAngle(0, 1, 2, k, theta0), pos)
    assert np.isfinite(forces).all()
    assert abs(energies - k*(np.pi - theta0)**2).max() < 1e-12


def test_dihedral_sign_convention():
    k = 0.8
    # sigma = -phi for |phi| < pi/2
    pos = get_dihedral_pos(np.pi/3)
    forces, energies = evaluate_interaction(HarmonicDihedral(0, 1, 2, 3, k, -np.pi/3), pos)
    assert abs(energies).max() < 1e-20
    assert abs(forces).max() < 1e-10
    forces, energies = evaluate_interaction(HarmonicDihedral(0, 1, 2, 3, k, np.pi/3), pos)
    assert abs(energies - k*(2*np.pi/3)**2).max() < 1e-12
    pos = get_dihedral_pos(-np.pi/3)
    forces, energies = evaluate_interaction(HarmonicDihedral(0, 1, 2, 3, k, np.pi/3), pos)
    assert abs(energies).max() < 1e-20
    # beyond 90 degrees, the dihedral is folded: phi = 2pi/3 gives sigma = pi/3
    pos = get_dihedral_pos(2*np.pi/3)
    forces, energies = evaluate_interaction(HarmonicDihedral(0, 1, 2, 3, k, np.pi/3), pos)
    assert abs(energies).max() < 1e-20


def test_dihedral_perpendicular():
    pos = np.array([[1.0, 0.0, 0.0], [0.0, 0.0, 0.0], [0.0, 0.0, 1.0], [0.0, 1.0, 1.0]])
    forces, energies = evaluate_interaction(HarmonicDihedral(0, 1, 2, 3, 1.0, 0.0), pos)
    assert abs(energies - 0.25*np.pi**2).max() < 1e-12
    assert np.isfinite(forces).all()
    forces, energies = evaluate_interaction(HarmonicDihedral(0, 1, 2, 3, 1.0, -0.5*np.pi), pos)
    assert abs(energies).max() < 1e-20


def test_dihedral_collinear():
    pos = np.array([[0.0, 0.0, -1.0], [0.0, 0.0, 0.0], [0.0, 0.0, 1.0], [0.5, 0.5, 1.0]])
    forces, energies = evaluate_interaction(HarmonicDihedral(0, 1, 2, 3, 1.0, 0.3), pos)
    assert abs(forces).max() == 0.0
    assert abs(energies).max() == 0.0


def test_tip_harmonic_planar():
    pos = np.array([[0.0, 0.0, 5.0], [0.3, 0.4, 1.0]])
    forces, energies = evaluate_interaction(TipHarmonic(0, 1, 2.0, 0.1), pos)
    assert abs(energies - 2.0*0.4**2).max() < 1e-12
    assert forces[0, 2] == 0.0
    assert forces[1, 2] == 0.0
    assert abs(forces[1] - 2*2.0*0.4*np.array([-0.6, -0.8, 0.0])).max() < 1e-12


def test_tip_harmonic_degenerate():
    pos = np.array([[0.2, 0.3, 5.0], [0.2, 0.3, 1.0]])
    forces, energies = evaluate_interaction(TipHarmonic(0, 1, 2.0, 0.1), pos)
    assert abs(forces).max() == 0.0
    assert abs(energies - 2.0*0.1**2).max() < 1e-15


def test_xy_harmonic():
    pos = np.array([[1.0, 2.0, 3.0]])
    forces, energies = evaluate_interaction(XYHarmonic(0, 0.5, 1.0, 3.0), pos)
    assert abs(energies[0] - 3.0*1.25) < 1e-12
    assert abs(forces[0] - [-3.0, -6.0, 0.0]).max() < 1e-12


def test_substrate_cutoff():
    z0, sigma, rc = -1.0, 1.5, 4.0
    substrate = Substrate.from_lj(0, z0, sigma, 0.2, 0.3, rc)
    assert abs(substrate.multiplier - 2*np.pi*0.2*0.3*sigma**2) < 1e-12
    pos = np.array([[0.3, 0.2, z0 + rc - 1e-7]])
    forces, energies = evaluate_interaction(substrate, pos)
    assert abs(energies).max() < 1e-10
    assert abs(forces).max() < 1e-8
    assert forces[0, 0] == 0.0
    assert forces[0, 1] == 0.0
    pos[0, 2] = z0 + rc + 0.5
    forces, energies = evaluate_interaction(substrate, pos)
    assert abs(forces).max() == 0.0
    assert abs(energies).max() == 0.0
    # close to the wall, the substrate is repulsive
    pos[0, 2] = z0 + 0.8*sigma
    forces, energies = evaluate_interaction(substrate, pos)
    assert forces[0, 2] > 0
    assert energies[0] > 0


def test_substrate_bad_cutoff():
    with pytest.raises(ValueError):
        Substrate(0, 0.0, 1.0, 1.0, 0.0)


#
# General properties
#


def test_pair_antisymmetry():
    for i in range(20):
        pos = get_pair_pos() + np.random.uniform(-0.2, 0.2, (2, 3))
        for interaction in get_pair_interactions():
            forces, energies = evaluate_interaction(interaction, pos)
            assert (forces[0] == -forces[1]).all()
            assert energies[0] == energies[1]


def test_degenerate_pairs():
    pos = np.array([[0.5, 0.5, 0.5], [0.5, 0.5, 0.5]])
    for interaction in LennardJones(0, 1, 1.0, 1.0), Coulomb(0, 1, 1.0):
        forces, energies = evaluate_interaction(interaction, pos)
        assert abs(forces).max() == 0.0
        assert abs(energies).max() == 0.0
    forces, energies = evaluate_interaction(Harmonic(0, 1, 2.0, 1.5), pos)
    assert abs(forces).max() == 0.0
    assert abs(energies - 4.5).max() < 1e-15
    forces, energies = evaluate_interaction(Morse(0, 1, 0.5, 1.0, 1.0), pos)
    assert abs(forces).max() == 0.0
    assert np.isfinite(energies).all()


def test_accumulation_is_additive():
    pos = np.array([[1.0, 0.0, 0.0], [0.0, 0.0, 0.0], [0.0, 1.1, 0.3], [0.7, 1.0, 1.2]])
    interactions = get_pair_interactions() + [
        HarmonicAngle(0, 1, 2, 1.0, 1.2),
        HarmonicDihedral(0, 1, 2, 3, 1.0, 0.2),
        XYHarmonic(3, 0.1, 0.2, 0.5),
        Substrate(2, -1.0, 1.0, 0.1, 3.0),
    ]
    for interaction in interactions:
        ref_forces, ref_energies = evaluate_interaction(interaction, pos)
        forces = np.random.uniform(-1, 1, (4, 3))
        energies = np.random.uniform(-1, 1, 4)
        forces_before = forces.copy()
        energies_before = energies.copy()
        interaction.eval(pos, forces, energies)
        assert abs(forces - forces_before - ref_forces).max() < 1e-12
        assert abs(energies - energies_before - ref_energies).max() < 1e-12


def test_negative_index():
    with pytest.raises(ValueError):
        Harmonic(-1, 0, 1.0, 1.0)


def test_index_type():
    with pytest.raises(TypeError):
        Harmonic(1.7, 0, 1.0, 1.0)
    with pytest.raises(TypeError):
        XYHarmonic(1.0, 0.0, 0.0, 1.0)
    assert Coulomb(np.int64(2), 0, 1.0).indexes == (2, 0)


def test_get_log():
    assert LennardJones(0, 1, 1.0, 2.0).get_log().startswith('LennardJones[0, 1]')
    assert HarmonicDihedral(0, 1, 2, 3, 1.0, 0.0).kind == 'dihedral'


#
# Consistency of forces and energies
#


def test_gradient_pairs():
    pos = get_pair_pos()
    for interaction in get_pair_interactions():
        check_gradient_interaction(interaction, pos)


def test_gradient_angle():
    pos = np.array([[1.0, 0.1, 0.0], [0.0, 0.0, 0.2], [-0.3, 1.1, 0.1]])
    check_gradient_interaction(HarmonicAngle(0, 1, 2, 1.3, 1.1), pos)
    check_gradient_interaction(HarmonicAngle(0, 1, 2, 0.4, 2.5), pos)


def test_gradient_dihedral():
    for phi in -1.2, -0.4, 0.3, 1.0, 2.2:
        pos = get_dihedral_pos(phi)
        pos += np.array([[0.1, 0.0, -0.1], [0.0, 0.05, 0.0], [0.02, 0.0, 0.1], [0.0, -0.1, 0.0]])
        check_gradient_interaction(HarmonicDihedral(0, 1, 2, 3, 0.9, 0.25), pos)


def test_gradient_one_body():
    pos = np.array([[0.4, -0.3, 1.2]])
    check_gradient_interaction(XYHarmonic(0, 0.1, 0.2, 1.7), pos)
    check_gradient_interaction(Substrate.from_lj(0, 0.0, 1.0, 0.5, 0.4, 3.0), pos)


def test_gradient_probe_model():
    pos = get_probe_positions()
    for j in range(2, 6):
        check_gradient_interaction(LennardJones.from_epsilon_sigma(1, j, 0.01, 3.0), pos)
        check_gradient_interaction(Coulomb(1, j, 0.05*(-1)**j), pos)
    check_gradient_interaction(Harmonic(0, 1, 0.5, 4.0), pos)
    check_gradient_interaction(TipHarmonic(0, 1, 0.5, 0.0), pos)
