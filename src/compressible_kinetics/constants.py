from scipy import constants

N_A = constants.Avogadro  # [1/mol]

k = constants.Boltzmann  # [J/K]

e = constants.e  # [C] elementary charge

R_universal = constants.R  # [J/(mol K)] universal gas constant

P_atm = constants.atm  # [Pa] standard pressure for equilibrium constants

calorie = constants.calorie  # [J] thermochemical calorie
