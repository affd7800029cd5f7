"""
config.py
Global configuration for the Rho-Myosin spine signaling model.

Species enumeration, output grouping, initial conditions and the fixed
constants of the adaptive integrator.
"""
from enum import IntEnum

import numpy as np


class Species(IntEnum):
    # CaMKII / calcium-calmodulin module
    Ca = 0
    CaM = 1
    CaCaM = 2
    Ng = 3
    NgCaM = 4
    CaMKII = 5
    Factin = 6
    CaMKIIFactin = 7
    Gactin = 8
    CaMKIIGactin = 9
    CaMKIIp = 10
    CaN = 11
    CaNact = 12
    I1 = 13
    I1act = 14
    PP1 = 15
    PP1act = 16
    # Cdc42 / Arp2/3 module
    Cdc42GEF = 17
    Cdc42GEFact = 18
    Cdc42GDP = 19
    Cdc42GTP = 20
    GAP = 21
    GAPact = 22
    WASP = 23
    WASPact = 24
    Arp23 = 25
    Arp23act = 26
    # cofilin module
    SSH1 = 27
    SSH1act = 28
    LIMK = 29
    LIMKact = 30
    Cofilin = 31
    Cofilinact = 32
    # actin polymerization / protrusion module
    Fnewactin = 33
    B = 34
    Bp = 35
    # Rho / ROCK / myosin module
    RhoGEF = 36
    RhoGEFact = 37
    RhoGDP = 38
    RhoGTP = 39
    ROCK = 40
    ROCKact = 41
    MyoPpase = 42
    MyoPpaseact = 43
    MLC = 44
    MLCact = 45


N_SPECIES = len(Species)
SPECIES_NAMES = tuple(s.name for s in Species)

# Species each kinetics module introduces, in output order
SPECIES_GROUPS = {
    "camkii": SPECIES_NAMES[0:17],
    "arp23": SPECIES_NAMES[17:27],
    "cofilin": SPECIES_NAMES[27:33],
    "actin": SPECIES_NAMES[33:36],
    "rho": SPECIES_NAMES[36:46],
}

# Initial concentrations (Table S8); every other species starts at zero
INITIAL_CONCENTRATIONS = {
    Species.Ca: 1.0,
    Species.CaMKIIFactin: 10.0,
    Species.CaMKIIGactin: 10.0,
    Species.CaN: 1.0,
    Species.CaM: 10.0,
    Species.Ng: 20.0,
    Species.I1: 1.8,
    Species.PP1: 0.27,
    Species.WASP: 1.0,
    Species.Arp23: 1.0,
    Species.Cdc42GDP: 1.0,
    Species.Cdc42GEF: 0.1,
    Species.LIMK: 2.0,
    Species.SSH1: 2.0,
    Species.Cofilin: 2.0,
    Species.Bp: 1.0,
    Species.B: 30.0,
    Species.MyoPpaseact: 0.1,
    Species.RhoGEF: 0.1,
    Species.RhoGDP: 1.0,
    Species.ROCK: 1.0,
    Species.MyoPpase: 1.1,
    Species.MLC: 5.0,
    Species.GAP: 0.1,
}

# Linear combinations whose time derivative vanishes under the stoichiometry
CONSERVED_MOIETIES = {
    "CaM_total": {Species.CaM: 1.0, Species.CaCaM: 1.0, Species.NgCaM: 1.0},
    "Ng_total": {Species.Ng: 1.0, Species.NgCaM: 1.0},
    "Ca_total": {Species.Ca: 1.0, Species.CaCaM: 3.0},
    "CaMKII_total": {Species.CaMKII: 1.0, Species.CaMKIIFactin: 1.0,
                     Species.CaMKIIGactin: 1.0, Species.CaMKIIp: 1.0},
    "CaN_total": {Species.CaN: 1.0, Species.CaNact: 1.0},
    "I1_total": {Species.I1: 1.0, Species.I1act: 1.0},
    "PP1_total": {Species.PP1: 1.0, Species.PP1act: 1.0},
    "Cdc42GEF_total": {Species.Cdc42GEF: 1.0, Species.Cdc42GEFact: 1.0},
    "GAP_total": {Species.GAP: 1.0, Species.GAPact: 1.0},
    "SSH1_total": {Species.SSH1: 1.0, Species.SSH1act: 1.0},
    "LIMK_total": {Species.LIMK: 1.0, Species.LIMKact: 1.0},
    "Cofilin_total": {Species.Cofilin: 1.0, Species.Cofilinact: 1.0},
    "RhoGEF_total": {Species.RhoGEF: 1.0, Species.RhoGEFact: 1.0},
    "ROCK_total": {Species.ROCK: 1.0, Species.ROCKact: 1.0},
    "MyoPpase_total": {Species.MyoPpase: 1.0, Species.MyoPpaseact: 1.0},
    "MLC_total": {Species.MLC: 1.0, Species.MLCact: 1.0},
}

# Integration run
T_END = 300.0      # max simulation time
DT0 = 0.01         # initial step size
DT_SAVE = 0.1      # time interval between data points
TOLERANCE = 1.0e-6 # acceptable local error per step

# Step-size control
SHRINK_MAX = 0.1   # decrease step size by no more than this factor
GROW_MAX = 1.2     # increase step size by no more than this factor
SAFETY = 0.9       # safety factor in adaptive step-size control
MIN_STEP = 1.0e-6  # minimum step size

DEFAULT_OUTPUT = "data.csv"


class RunSettings:
    t_end: float = T_END
    dt0: float = DT0
    dt_save: float = DT_SAVE
    tolerance: float = TOLERANCE

    @classmethod
    def set_run(cls, t_end=T_END, dt0=DT0, dt_save=DT_SAVE, tolerance=TOLERANCE):
        cls.t_end = t_end
        cls.dt0 = dt0
        cls.dt_save = dt_save
        cls.tolerance = tolerance

    @classmethod
    def as_dict(cls):
        return {
            "t_end": cls.t_end,
            "dt0": cls.dt0,
            "dt_save": cls.dt_save,
            "tolerance": cls.tolerance,
        }


def initial_state():
    """Return a fresh copy of the documented initial condition vector."""
    x0 = np.zeros(N_SPECIES, dtype=np.float64)
    for species, value in INITIAL_CONCENTRATIONS.items():
        x0[species] = value
    return x0


def output_columns():
    """Header of the sample table: time followed by every species, group by group."""
    columns = ["t"]
    for names in SPECIES_GROUPS.values():
        columns.extend(names)
    return columns
