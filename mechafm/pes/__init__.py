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
"""Force field of the probe-particle model

   This package provides the machinery to evaluate the forces and energies on
   the probe and the other particles of the model, for a given array of
   positions. The interface towards the minimizer and the scan loop is kept
   thin: positions are input, per-particle forces and energies are output.

   The package contains:

   * :mod:`mechafm.pes.grid`: regular lattices and precomputed force grids with
     trilinear interpolation.
   * :mod:`mechafm.pes.esgrid`: the spectral construction of the electrostatic
     force grid from a tabulated potential and a Gaussian tip charge.
   * :mod:`mechafm.pes.interactions`: the interaction kernels.
   * :mod:`mechafm.pes.ff`: the ``ForceField`` container that evaluates a set
     of interactions.

   The electrostatic force grid is expensive to build and is therefore
   computed only once, when its interaction is constructed. All other
   objects are cheap and immutable after construction, so each worker
   process can simply hold its own copies.
"""

from mechafm.pes.grid import *
from mechafm.pes.esgrid import *
from mechafm.pes.interactions import *
from mechafm.pes.ff import *
