# Clinic management backend package
