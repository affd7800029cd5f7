"""
core_mechanisms.py
Numba-compiled Right-Hand Side (RHS) functions for ODE integration.

Each kinetics module returns the contributions of its own reactions as a
value array aligned with a fixed array of target species. The layered
evaluators add those contributions into a fresh derivative vector, inner
module first, so species shared between modules (Factin, Gactin, Arp23act)
accumulate instead of being overwritten.
"""
import math

import numpy as np
from numba import njit

from rhomyosin import parameters as prm
from rhomyosin.config import N_SPECIES, SPECIES_NAMES, Species

# integer aliases of Species for the compiled kernels
(Ca, CaM, CaCaM, Ng, NgCaM, CaMKII, Factin, CaMKIIFactin, Gactin, CaMKIIGactin,
 CaMKIIp, CaN, CaNact, I1, I1act, PP1, PP1act,
 Cdc42GEF, Cdc42GEFact, Cdc42GDP, Cdc42GTP, GAP, GAPact, WASP, WASPact, Arp23, Arp23act,
 SSH1, SSH1act, LIMK, LIMKact, Cofilin, Cofilinact,
 Fnewactin, B, Bp,
 RhoGEF, RhoGEFact, RhoGDP, RhoGTP, ROCK, ROCKact, MyoPpase, MyoPpaseact, MLC, MLCact) = \
    tuple(int(s) for s in Species)

CAMKII_TARGETS = np.array([
    Ca, CaM, CaCaM, Ng, NgCaM, CaMKII, Factin, CaMKIIFactin, Gactin, CaMKIIGactin,
    CaMKIIp, CaN, CaNact, I1, I1act, PP1, PP1act,
], dtype=np.int64)

ARP23_TARGETS = np.array([
    Cdc42GEF, Cdc42GEFact, Cdc42GDP, Cdc42GTP, GAP, GAPact, WASP, WASPact, Arp23, Arp23act,
], dtype=np.int64)

COFILIN_TARGETS = np.array([
    SSH1, SSH1act, LIMK, LIMKact, Cofilin, Cofilinact,
], dtype=np.int64)

# Factin, Gactin and Arp23act are already owned by inner modules
ACTIN_TARGETS = np.array([
    Fnewactin, Factin, Gactin, Arp23act, B, Bp,
], dtype=np.int64)

RHO_TARGETS = np.array([
    RhoGEF, RhoGEFact, RhoGDP, RhoGTP, ROCK, ROCKact, MyoPpase, MyoPpaseact, MLC, MLCact,
], dtype=np.int64)


@njit(cache=True)
def accumulate(dxdt, targets, values):
    for k in range(targets.size):
        dxdt[targets[k]] += values[k]


@njit(cache=True, error_model="numpy")
def camkii_contribution(x):
    """Calcium/calmodulin binding and the CaMKII/phosphatase activation cycle."""
    v1 = prm.CAMKII_K_CA_CAM * x[Ca] ** prm.CAMKII_N_CA - x[CaCaM]
    v2 = prm.CAMKII_K_NG_CAM * x[Ng] * x[CaM] - x[NgCaM]
    v3 = x[CaMKII] * x[Factin] - prm.CAMKII_KD_FACTIN * x[CaMKIIFactin]
    v4 = x[CaMKII] * x[Gactin] - prm.CAMKII_KD_GACTIN * x[CaMKIIGactin]
    v5 = ((prm.CAMKII_KCAT_CACAM * x[CaCaM] ** prm.CAMKII_HILL * x[CaMKII])
          / (prm.CAMKII_K_CACAM ** prm.CAMKII_HILL + x[CaCaM] ** prm.CAMKII_HILL)
          + (prm.CAMKII_KCAT_AUTO * x[CaMKIIp] * x[CaMKII]) / (prm.CAMKII_KM_AUTO + x[CaMKII]))
    v6 = (prm.CAMKII_KCAT_PP1 * x[PP1act] * x[CaMKIIp]) / (prm.CAMKII_KM_PP1 + x[CaMKIIp])
    v7 = ((prm.CAMKII_KCAT_CAN * x[CaCaM] ** prm.CAMKII_HILL * x[CaN])
          / (prm.CAMKII_K_CAN ** prm.CAMKII_HILL + x[CaCaM] ** prm.CAMKII_HILL))
    v8 = (prm.CAMKII_KCAT_CAN_OFF * x[CaMKIIp] * x[CaN]) / (prm.CAMKII_KM_CAN_OFF + x[CaN])
    v9 = (prm.CAMKII_KCAT_I1 * x[CaNact] * x[I1]) / (prm.CAMKII_KM_I1 + x[I1])
    v10 = (prm.CAMKII_KCAT_I1_OFF * x[CaMKIIp] * x[I1act]) / (prm.CAMKII_KM_I1_OFF + x[I1act])
    v11 = ((prm.CAMKII_KCAT_PP1_I1 * x[I1act] * x[PP1]) / (prm.CAMKII_KM_PP1_ACT + x[PP1])
           + (prm.CAMKII_KCAT_PP1_AUTO * x[PP1act] * x[PP1]) / (prm.CAMKII_KM_PP1_ACT + x[PP1]))
    v12 = (prm.CAMKII_KCAT_PP1_OFF * x[CaMKIIp] * x[PP1act]) / (prm.CAMKII_KM_PP1_OFF + x[PP1act])

    # order follows CAMKII_TARGETS
    return np.array([
        -3.0 * v1,           # Ca
        -v1 - v2,            # CaM
        v1,                  # CaCaM
        -v2,                 # Ng
        v2,                  # NgCaM
        -v3 - v4 - v5 + v6,  # CaMKII
        -v3,                 # Factin
        v3,                  # CaMKIIFactin
        -v4,                 # Gactin
        v4,                  # CaMKIIGactin
        v5 - v6,             # CaMKIIp
        -v7 + v8,            # CaN
        v7 - v8,             # CaNact
        -v9 + v10,           # I1
        v9 - v10,            # I1act
        -v11 + v12,          # PP1
        v11 - v12,           # PP1act
    ])


@njit(cache=True, error_model="numpy")
def arp23_contribution(x):
    """Cdc42/WASP control of Arp2/3 activation."""
    v1 = (prm.ARP23_KCAT_GEF_ON * x[CaMKIIp] * x[Cdc42GEF]) / (prm.ARP23_KM_GEF_ON + x[Cdc42GEF])
    v2 = (prm.ARP23_KCAT_GEF_OFF * x[PP1act] * x[Cdc42GEFact]) / (prm.ARP23_KM_GEF_OFF + x[Cdc42GEFact])
    v3 = (prm.ARP23_KCAT_GDP_GTP * x[Cdc42GEFact] * x[Cdc42GDP]) / (prm.ARP23_KM_GDP_GTP + x[Cdc42GDP])
    v4 = (prm.ARP23_KCAT_GTP_GDP * x[GAPact] * x[Cdc42GTP]) / (prm.ARP23_KM_GTP_GDP + x[Cdc42GTP])
    v5 = (prm.ARP23_KCAT_GAP_ON * x[CaMKIIp] * x[GAP]) / (prm.ARP23_KM_GAP_ON + x[GAP])
    v6 = (prm.ARP23_KCAT_GAP_OFF * x[PP1act] * x[GAPact]) / (prm.ARP23_KM_GAP_OFF + x[GAPact])
    v7 = prm.ARP23_KF_WASP * x[Cdc42GTP] * x[WASP] - prm.ARP23_KR_WASP * x[WASPact]
    v8 = prm.ARP23_KF_ARP23 * x[Arp23] * x[WASPact] - prm.ARP23_KR_ARP23 * x[Arp23act]

    return np.array([
        -v1 + v2,       # Cdc42GEF
        v1 - v2,        # Cdc42GEFact
        -v3 + v4,       # Cdc42GDP
        v3 - v4 - v7,   # Cdc42GTP
        -v5 + v6,       # GAP
        v5 - v6,        # GAPact
        -v7,            # WASP
        v7 - v8,        # WASPact
        -v8,            # Arp23
        v8,             # Arp23act
    ])


@njit(cache=True, error_model="numpy")
def cofilin_contribution(x):
    v1 = (prm.COFILIN_KCAT_SSH1_ON * x[CaNact] * x[SSH1]) / (prm.COFILIN_KM_SSH1_ON + x[SSH1])
    v2 = (prm.COFILIN_KCAT_SSH1_OFF * x[CaMKIIp] * x[SSH1act]) / (prm.COFILIN_KM_SSH1_OFF + x[SSH1act])
    v3 = (prm.COFILIN_KCAT_LIMK_ON * x[ROCKact] * x[LIMK]) / (prm.COFILIN_KM_LIMK_ON + x[LIMK])
    v4 = (prm.COFILIN_KCAT_LIMK_OFF * x[SSH1act] * x[LIMKact]) / (prm.COFILIN_KM_LIMK_OFF + x[LIMKact])
    v5 = (prm.COFILIN_KCAT_COF_ON * x[SSH1act] * x[Cofilin]) / (prm.COFILIN_KM_COF_ON + x[Cofilin])
    v6 = (prm.COFILIN_KCAT_COF_OFF * x[LIMKact] * x[Cofilinact]) / (prm.COFILIN_KM_COF_OFF + x[Cofilinact])

    return np.array([
        -v1 + v2,   # SSH1
        v1 - v2,    # SSH1act
        -v3 + v4,   # LIMK
        v3 - v4,    # LIMKact
        -v5 + v6,   # Cofilin
        v5 - v6,    # Cofilinact
    ])


@njit(cache=True, error_model="numpy")
def actin_contribution(x):
    """
    Actin polymerization and membrane protrusion.

    Severing and nucleation feed the barbed-end pool B, which drives the
    protrusion variable Bp through a Brownian-ratchet membrane velocity.
    The Factin, Gactin and Arp23act entries are increments on top of what
    the CaMKII and Arp2/3 modules already contribute.
    """
    fsev = ((prm.ACTIN_K_SEV * prm.ACTIN_SEV_COFILIN * x[Cofilinact] ** prm.ACTIN_HILL_COFILIN * x[Factin])
            / prm.ACTIN_SEV_SCALE)
    fnuc = (prm.ACTIN_KCAT_NUC * x[Arp23act] * x[Factin] * x[Gactin]) / (prm.ACTIN_KM_NUC + x[Arp23act])

    vmb = prm.ACTIN_V_MEMBRANE * x[Bp] / (x[Bp] + prm.ACTIN_MB_SCALE * math.exp(prm.ACTIN_MB_FORCE / x[Bp]))

    v1 = prm.ACTIN_K_MATURE * x[Fnewactin]
    v2 = fsev + prm.ACTIN_K_DEPOL * x[Factin] + prm.ACTIN_K_TURNOVER * x[Factin]
    v3 = fnuc
    v4 = prm.ACTIN_BARBED_YIELD * (fsev + fnuc) - prm.ACTIN_K_CAP * x[B]
    v5 = (prm.ACTIN_K_PROTRUDE - vmb) * x[B] - prm.ACTIN_K_RETRACT * x[Bp]

    return np.array([
        -v1,        # Fnewactin
        v1 - v2,    # Factin (+=)
        v2 - v3,    # Gactin (+=)
        -v3,        # Arp23act (+=)
        v4,         # B
        v5,         # Bp
    ])


@njit(cache=True, error_model="numpy")
def rho_contribution(x):
    """Rho GTPase, ROCK and myosin light chain contractility."""
    # The denominator adds the RhoGEF species index, not its concentration.
    # Kept as in the published model run; see DESIGN.md.
    v1 = (prm.RHO_KCAT_GEF_ON * x[CaMKIIp] * x[RhoGEF]) / (prm.RHO_KM_GEF_ON + RhoGEF)
    v2 = (prm.RHO_KCAT_GEF_OFF * x[PP1act] * x[RhoGEFact]) / (prm.RHO_KM_GEF_OFF + x[RhoGEFact])
    v3 = (prm.RHO_KCAT_GDP_GTP * x[RhoGEFact] * x[RhoGDP]) / (prm.RHO_KM_GDP_GTP + x[RhoGDP])
    v4 = (prm.RHO_KCAT_GTP_GDP * x[GAPact] * x[RhoGTP]) / (prm.RHO_KM_GTP_GDP + x[RhoGTP])
    v5 = prm.RHO_KF_ROCK * x[RhoGTP] * x[ROCK] - prm.RHO_KR_ROCK * x[ROCKact]
    v6 = (prm.RHO_K_PPASE_BASAL * x[MyoPpase]
          + (prm.RHO_KCAT_PPASE_AUTO * x[MyoPpaseact] * x[MyoPpase]) / (prm.RHO_KM_PPASE_AUTO + x[MyoPpase]))
    v7 = (prm.RHO_KCAT_PPASE_OFF * x[ROCKact] * x[MyoPpaseact]) / (prm.RHO_KM_PPASE_OFF + x[MyoPpaseact])
    v8 = (prm.RHO_K_MLC_BASAL * x[MLC]
          + (prm.RHO_KCAT_MLC_ON * x[ROCKact] * x[MLC]) / (prm.RHO_KM_MLC_ON + x[MLC]))
    v9 = (prm.RHO_KCAT_MLC_OFF * x[MyoPpaseact] * x[MLCact]) / (prm.RHO_KM_MLC_OFF + x[MLCact])

    return np.array([
        -v1 + v2,       # RhoGEF
        v1 - v2,        # RhoGEFact
        -v3 + v4,       # RhoGDP
        v3 - v4 - v5,   # RhoGTP
        -v5,            # ROCK
        v5,             # ROCKact
        -v6 + v7,       # MyoPpase
        v6 - v7,        # MyoPpaseact
        -v8 + v9,       # MLC
        v8 - v9,        # MLCact
    ])


# ---------------------------------------------------------------------
# Layered evaluators: each layer evaluates the one inside it first
# ---------------------------------------------------------------------

@njit(cache=True)
def rhs_camkii(t, x):
    dxdt = np.zeros(N_SPECIES)
    accumulate(dxdt, CAMKII_TARGETS, camkii_contribution(x))
    return dxdt


@njit(cache=True)
def rhs_arp23(t, x):
    dxdt = rhs_camkii(t, x)
    accumulate(dxdt, ARP23_TARGETS, arp23_contribution(x))
    return dxdt


@njit(cache=True)
def rhs_cofilin(t, x):
    dxdt = rhs_arp23(t, x)
    accumulate(dxdt, COFILIN_TARGETS, cofilin_contribution(x))
    return dxdt


@njit(cache=True)
def rhs_actin(t, x):
    dxdt = rhs_cofilin(t, x)
    accumulate(dxdt, ACTIN_TARGETS, actin_contribution(x))
    return dxdt


@njit(cache=True)
def rhs(t, x):
    """Full 46-species derivative dx/dt at time t."""
    dxdt = rhs_actin(t, x)
    accumulate(dxdt, RHO_TARGETS, rho_contribution(x))
    return dxdt


MODULES = (
    ("camkii", camkii_contribution, CAMKII_TARGETS),
    ("arp23", arp23_contribution, ARP23_TARGETS),
    ("cofilin", cofilin_contribution, COFILIN_TARGETS),
    ("actin", actin_contribution, ACTIN_TARGETS),
    ("rho", rho_contribution, RHO_TARGETS),
)


def evaluate_rhs(t, x):
    """
    Python entry point for the derivative evaluator.

    Args:
        t (float): Current time.
        x (array-like): State vector of length N_SPECIES.

    Returns:
        np.ndarray: Fresh derivative vector dx/dt.
    """
    x_arr = np.ascontiguousarray(x, dtype=np.float64)
    if x_arr.shape != (N_SPECIES,):
        raise ValueError(f"State must have shape ({N_SPECIES},), got {x_arr.shape}")
    return rhs(float(t), x_arr)


def module_contributions(x):
    """
    Per-module contributions at state x, keyed by module then species name.

    Species touched by several modules appear under each of them; summing
    over modules reproduces evaluate_rhs.
    """
    x_arr = np.ascontiguousarray(x, dtype=np.float64)
    out = {}
    for name, contribution, targets in MODULES:
        values = contribution(x_arr)
        out[name] = {SPECIES_NAMES[idx]: float(v) for idx, v in zip(targets, values)}
    return out
