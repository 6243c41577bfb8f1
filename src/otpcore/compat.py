from secrets import SystemRandom

# Source of randomness for generated secrets; backed by os.urandom.
random = SystemRandom()
