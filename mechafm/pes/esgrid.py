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
'''Electrostatic force grid from a tabulated potential

   The charged apex of the probe is modeled as a Gaussian charge cloud. Its
   electrostatic energy as a function of the position of its center is the
   convolution of the cloud with the tabulated surface potential. This module
   computes that convolution and its derivatives with fast Fourier transforms,
   once, and stores the result in a periodic
   :class:`mechafm.pes.grid.ForceGrid`:

   1. The Gaussian density is sampled on a lattice with the same shape and
      spacing as the potential, centered at the origin cell. Minimum-image
      offsets are used, so the cloud wraps around the periodic boundaries.
   2. Potential and density are transformed to reciprocal space. Their
      product, scaled with the volume of one lattice cell, is the energy in
      reciprocal space.
   3. The energy is transformed back to real space. Each force component is
      obtained by multiplying the energy spectrum with ``-2*pi*i*k`` along
      that axis and transforming back. The discrete transforms imply periodic
      boundary conditions on the potential lattice.
'''


import numpy as np

from mechafm.log import log, timer
from mechafm.pes.grid import DataGrid, ForceGrid


__all__ = [
    'GAUSSIAN_CUTOFF', 'CHARGE_TOLERANCE', 'compute_wavenumbers',
    'minimum_image_offsets', 'gaussian_tip_density',
    'build_electrostatic_force_grid',
]


# Relative amplitude below which the Gaussian tip density is set to zero.
GAUSSIAN_CUTOFF = 1e-10
# Relative deviation of the integrated tip charge that triggers a warning.
CHARGE_TOLERANCE = 1e-3


def compute_wavenumbers(npoint, spacing):
    '''Wavenumbers of the unshifted output of a forward transform

       Index i maps to ``i/(npoint*spacing)`` in the first half and to
       ``(i - npoint)/(npoint*spacing)`` in the second half.
    '''
    return np.fft.fftfreq(npoint, spacing)


def minimum_image_offsets(npoint, spacing):
    '''Signed distances of lattice nodes from node zero, in the same order as
       the wavenumbers of ``compute_wavenumbers``.
    '''
    return np.fft.fftfreq(npoint, 1.0/npoint)*spacing


def get_cutoff_radius(gaussian_width, threshold=GAUSSIAN_CUTOFF):
    '''The distance at which exp(-r^2/(2*width^2)) drops to ``threshold``.'''
    return gaussian_width*np.sqrt(-2.0*np.log(threshold))


def gaussian_tip_density(shape, spacing, tip_charge, gaussian_width, threshold=GAUSSIAN_CUTOFF):
    '''Sample the normalized Gaussian charge cloud of the tip on a lattice

       **Arguments:**

       shape
                The number of lattice nodes along x, y and z.

       spacing
                The lattice spacing along x, y and z.

       tip_charge
                The total charge of the cloud.

       gaussian_width
                The standard deviation of the Gaussian.

       **Optional arguments:**

       threshold
                Nodes where the Gaussian is smaller than ``threshold`` times
                its peak value are left at zero.

       **Returns:** a periodic ``DataGrid`` with the charge density, with
       node (0, 0, 0) at the center of the cloud.
    '''
    if not np.isfinite(tip_charge):
        raise ValueError('The tip charge must be finite, got %s.' % tip_charge)
    if not (np.isfinite(gaussian_width) and gaussian_width > 0):
        raise ValueError('The Gaussian width must be finite and positive, got %s.' % gaussian_width)
    spacing = np.asarray(spacing, float)
    rcut = get_cutoff_radius(gaussian_width, threshold)
    dx, dy, dz = [minimum_image_offsets(n, s) for n, s in zip(shape, spacing)]
    rsq = dx[:, None, None]**2 + dy[None, :, None]**2 + dz[None, None, :]**2
    norm = 1.0/(gaussian_width*np.sqrt(2.0*np.pi))**3
    rho = tip_charge*norm*np.exp(-0.5*rsq/gaussian_width**2)
    rho[rsq > rcut**2] = 0.0
    return DataGrid(rho, spacing, periodic=True)


def _check_charge(rho, tip_charge, gaussian_width, report_charge):
    total_charge = rho.values.sum()*rho.volume_element
    if not np.isfinite(total_charge):
        raise ValueError('The integrated tip charge is not finite.')
    if report_charge and log.do_low:
        with log.section('ESGRID'):
            log('Total charge at tip: %.10e' % total_charge)
    if tip_charge != 0.0 and abs(total_charge - tip_charge) > CHARGE_TOLERANCE*abs(tip_charge):
        log.warn('The integrated tip charge (%.5e) deviates from the requested charge (%.5e). '
                 'The Gaussian width (%.5e) is probably too small for the grid spacing.' % (
                 total_charge, tip_charge, gaussian_width))
    return total_charge


def build_electrostatic_force_grid(potential, tip_charge, gaussian_width, report_charge=False):
    '''Convolve a tabulated potential with the Gaussian tip charge

       **Arguments:**

       potential
                A ``DataGrid`` with the electrostatic potential of the sample.
                It is treated as periodic, regardless of its periodic flag.

       tip_charge
                The total charge at the tip apex.

       gaussian_width
                The standard deviation of the Gaussian charge cloud.

       **Optional arguments:**

       report_charge
                When set, the total charge of the sampled cloud is written to
                the log, which is useful to check that the lattice resolves
                the Gaussian.

       **Returns:** a periodic ``ForceGrid`` with the energy of the tip cloud
       and the force on it, as a function of the position of its center, on
       the lattice of the potential.
    '''
    if not isinstance(potential, DataGrid):
        raise TypeError('The potential must be a DataGrid instance.')
    if not np.isfinite(potential.values).all():
        raise ValueError('The tabulated potential contains non-finite values.')
    with timer.section('ES grid'):
        shape = potential.shape
        spacing = potential.spacing
        rcut = get_cutoff_radius(gaussian_width) if np.isfinite(gaussian_width) else np.inf
        if log.do_medium:
            with log.section('ESGRID'):
                log('Building the electrostatic force grid.')
                log.hline()
                log('  grid points:      %i x %i x %i' % shape)
                log('  spacing:          %.5f %.5f %.5f' % tuple(spacing))
                log('  tip charge:       %.5e' % tip_charge)
                log('  Gaussian width:   %.5e' % gaussian_width)
                log('  Gaussian cutoff:  %.5e' % rcut)
                log.hline()

        rho = gaussian_tip_density(shape, spacing, tip_charge, gaussian_width)
        if (2*rcut > potential.extent).any():
            log.warn('The Gaussian cutoff (%.5e) exceeds half of the grid extent. '
                     'Periodic images of the tip charge overlap.' % rcut)
        _check_charge(rho, tip_charge, gaussian_width, report_charge)

        pot_kspace = np.fft.fftn(potential.values)
        rho_kspace = np.fft.fftn(rho.values)
        energy_kspace = pot_kspace*rho_kspace*potential.volume_element
        energy = np.fft.ifftn(energy_kspace).real

        kx, ky, kz = [compute_wavenumbers(n, s) for n, s in zip(shape, spacing)]
        fx = np.fft.ifftn(-2j*np.pi*kx[:, None, None]*energy_kspace).real
        fy = np.fft.ifftn(-2j*np.pi*ky[None, :, None]*energy_kspace).real
        fz = np.fft.ifftn(-2j*np.pi*kz[None, None, :]*energy_kspace).real

        energy_grid = DataGrid(energy, spacing, potential.origin, periodic=True)
        return ForceGrid.from_grids(energy_grid, fx, fy, fz)
