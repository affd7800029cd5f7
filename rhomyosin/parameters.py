"""
parameters.py
Named rate constants of the Rho-Myosin spine model (Rangamani et al. 2016).

Every literal that appears in a kinetic law lives here, prefixed with the
kinetics module that uses it. Concentrations are in uM and time in s.
The compiled kernels read these as frozen globals, so changing a value
requires a fresh process.
"""
import sys

import pandas as pd

MODULE_PREFIXES = ("CAMKII_", "ARP23_", "COFILIN_", "ACTIN_", "RHO_")

# ---------------------------------------------------------------------
# CaMKII: Ca/CaM fast equilibrium, neurogranin, CaMKII, CaN, I1, PP1
# ---------------------------------------------------------------------
CAMKII_K_CA_CAM = 7.75         # Ca3 + CaM <-> CaCaM, forward rate
CAMKII_N_CA = 3.0              # Ca ions per CaM in the fast-equilibrium law
CAMKII_K_NG_CAM = 5.0          # Ng + CaM <-> NgCaM, forward rate
CAMKII_KD_FACTIN = 4.0         # CaMKII-Factin dissociation rate
CAMKII_KD_GACTIN = 4.0         # CaMKII-Gactin dissociation rate
CAMKII_KCAT_CACAM = 120.0      # CaCaM-driven CaMKII phosphorylation, max rate
CAMKII_K_CACAM = 4.0           # CaCaM half-activation for CaMKII
CAMKII_HILL = 4.0              # Hill coefficient of CaCaM activation (CaMKII and CaN)
CAMKII_KCAT_AUTO = 1.0         # CaMKII autophosphorylation, max rate
CAMKII_KM_AUTO = 10.0
CAMKII_KCAT_PP1 = 15.0         # PP1 dephosphorylation of CaMKIIp
CAMKII_KM_PP1 = 3.0
CAMKII_KCAT_CAN = 127.0        # CaCaM activation of calcineurin
CAMKII_K_CAN = 0.34
CAMKII_KCAT_CAN_OFF = 0.34     # CaMKIIp deactivation of calcineurin
CAMKII_KM_CAN_OFF = 127.0
CAMKII_KCAT_I1 = 0.034         # CaNact activation of inhibitor-1
CAMKII_KM_I1 = 4.97
CAMKII_KCAT_I1_OFF = 0.0688    # CaMKIIp deactivation of inhibitor-1
CAMKII_KM_I1_OFF = 127.0
CAMKII_KCAT_PP1_I1 = 50.0      # I1act activation of PP1
CAMKII_KCAT_PP1_AUTO = 2.0     # PP1 autoactivation
CAMKII_KM_PP1_ACT = 80.0
CAMKII_KCAT_PP1_OFF = 0.07166  # CaMKIIp deactivation of PP1
CAMKII_KM_PP1_OFF = 4.97

# ---------------------------------------------------------------------
# Arp2/3: Cdc42GEF, Cdc42 GTPase cycle, GAP, WASP, Arp2/3
# ---------------------------------------------------------------------
ARP23_KCAT_GEF_ON = 0.01
ARP23_KM_GEF_ON = 1.0
ARP23_KCAT_GEF_OFF = 0.01
ARP23_KM_GEF_OFF = 1.0
ARP23_KCAT_GDP_GTP = 0.75      # GEF-catalysed nucleotide exchange
ARP23_KM_GDP_GTP = 1.0
ARP23_KCAT_GTP_GDP = 0.1       # GAP-catalysed hydrolysis
ARP23_KM_GTP_GDP = 1.0
ARP23_KCAT_GAP_ON = 0.01
ARP23_KM_GAP_ON = 1.0
ARP23_KCAT_GAP_OFF = 0.01
ARP23_KM_GAP_OFF = 1.0
ARP23_KF_WASP = 0.02           # Cdc42GTP + WASP -> WASPact
ARP23_KR_WASP = 0.001
ARP23_KF_ARP23 = 0.1           # WASPact activation of Arp2/3
ARP23_KR_ARP23 = 0.0

# ---------------------------------------------------------------------
# cofilin: SSH1, LIMK, cofilin
# ---------------------------------------------------------------------
COFILIN_KCAT_SSH1_ON = 0.34
COFILIN_KM_SSH1_ON = 4.97
COFILIN_KCAT_SSH1_OFF = 127.0
COFILIN_KM_SSH1_OFF = 0.34
COFILIN_KCAT_LIMK_ON = 0.9     # ROCK activation of LIMK
COFILIN_KM_LIMK_ON = 0.3
COFILIN_KCAT_LIMK_OFF = 0.34
COFILIN_KM_LIMK_OFF = 4.0
COFILIN_KCAT_COF_ON = 0.34     # SSH1 dephosphorylation of cofilin
COFILIN_KM_COF_ON = 4.0
COFILIN_KCAT_COF_OFF = 0.34    # LIMK phosphorylation of cofilin
COFILIN_KM_COF_OFF = 4.0

# ---------------------------------------------------------------------
# actin: severing, nucleation, filament pools, barbed ends, protrusion
# ---------------------------------------------------------------------
ACTIN_K_SEV = 0.1              # severing rate
ACTIN_SEV_COFILIN = 0.0002     # cofilin severing efficiency
ACTIN_SEV_SCALE = 0.0001       # severing normalisation
ACTIN_HILL_COFILIN = 4.0
ACTIN_KCAT_NUC = 15.3          # Arp2/3 branch nucleation
ACTIN_KM_NUC = 2.0
ACTIN_K_MATURE = 0.001         # new filament -> Factin
ACTIN_K_DEPOL = 0.1
ACTIN_K_TURNOVER = 0.01
ACTIN_BARBED_YIELD = 106.0     # barbed ends generated per severing/nucleation event
ACTIN_K_CAP = 0.04             # barbed-end capping
ACTIN_V_MEMBRANE = 0.1         # free membrane velocity
ACTIN_MB_SCALE = 10.0
ACTIN_MB_FORCE = 50.0          # membrane resistance in the Brownian-ratchet term
ACTIN_K_PROTRUDE = 0.1
ACTIN_K_RETRACT = 0.04

# ---------------------------------------------------------------------
# Rho: RhoGEF, Rho GTPase cycle, ROCK, myosin phosphatase, MLC
# ---------------------------------------------------------------------
RHO_KCAT_GEF_ON = 0.01
RHO_KM_GEF_ON = 1.0
RHO_KCAT_GEF_OFF = 0.1
RHO_KM_GEF_OFF = 1.0
RHO_KCAT_GDP_GTP = 0.75
RHO_KM_GDP_GTP = 1.0
RHO_KCAT_GTP_GDP = 0.1
RHO_KM_GTP_GDP = 1.0
RHO_KF_ROCK = 0.02             # RhoGTP + ROCK -> ROCKact
RHO_KR_ROCK = 0.001
RHO_K_PPASE_BASAL = 0.01
RHO_KCAT_PPASE_AUTO = 3.0
RHO_KM_PPASE_AUTO = 16.0
RHO_KCAT_PPASE_OFF = 2.357     # ROCK inhibition of myosin phosphatase
RHO_KM_PPASE_OFF = 0.1
RHO_K_MLC_BASAL = 0.01
RHO_KCAT_MLC_ON = 1.8          # ROCK phosphorylation of MLC
RHO_KM_MLC_ON = 2.47
RHO_KCAT_MLC_OFF = 1.0         # phosphatase dephosphorylation of MLC
RHO_KM_MLC_OFF = 16.0


def parameter_table():
    """
    Collect every rate constant into a table.

    Returns:
        pd.DataFrame: One row per constant with columns ``module``, ``name``
        and ``value``, in definition order.
    """
    module = sys.modules[__name__]
    rows = []
    for name, value in vars(module).items():
        for prefix in MODULE_PREFIXES:
            if name.startswith(prefix) and isinstance(value, float):
                rows.append({
                    "module": prefix.rstrip("_").lower(),
                    "name": name,
                    "value": value,
                })
    return pd.DataFrame(rows, columns=["module", "name", "value"])
