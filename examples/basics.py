from nectar import Maybe, Observable, observed, prop

# ------------------------------------------------------------------------------------------------

print()
print("=" * 100)
print("Declaring observed attributes")
print("-" * 100)
print()


# Attributes declared with prop() are observed: assigning them emits change events.
class Point(Observable):
    x = prop(0)
    y = prop(0)


p = Point()
p.listen_to(p, "change", lambda name, value: print(f"{name} changed to: {value}"))

p.x = 3  # Prints "x changed to: 3"
p.y = 4  # Prints "y changed to: 4"

# ------------------------------------------------------------------------------------------------

print()
print("=" * 100)
print("Listening to a single attribute, or a single value")
print("-" * 100)
print()

p.listen_to(p, "change:x", lambda value: print(f"x is now {value}"))
p.listen_to(p, "change:x:0", lambda: print("x is back at the origin"))

p.x = 10  # Prints "x changed to: 10" and "x is now 10"
p.x = 0  # ...and also "x is back at the origin"

# ------------------------------------------------------------------------------------------------

print()
print("=" * 100)
print("Listening once, and listening conditionally")
print("-" * 100)
print()


class Player(Observable):
    ready = prop(False)
    score = prop(0)


player = Player()

# Runs the first time only.
player.listen_to_once(player, "change:score", lambda value: print(f"First score: {value}"))

# Runs only while player.ready is truthy.
player.listen_to(player, "change:score&&ready", lambda value: print(f"Counted: {value}"))

player.score = 1  # Prints "First score: 1"
player.score = 2  # Nothing: the player is not ready
player.ready = True
player.score = 3  # Prints "Counted: 3"

# ------------------------------------------------------------------------------------------------

print()
print("=" * 100)
print("Validation and custom properties")
print("-" * 100)
print()


class Thermostat(Observable):
    # Values the predicate rejects are logged and ignored.
    target = prop(20, validate=lambda v: 5 <= v <= 30)

    def __init__(self):
        super().__init__()
        self._celsius = 20.0

    @property
    def celsius(self):
        return self._celsius

    @observed
    @celsius.setter
    def celsius(self, value):
        self._celsius = float(value)


thermostat = Thermostat()
thermostat.target = 45  # Logged as invalid; target stays 20
thermostat.celsius = 21
print(thermostat.to_dict())  # {'target': 20, 'celsius': 21.0}

# ------------------------------------------------------------------------------------------------

print()
print("=" * 100)
print("Optional values")
print("-" * 100)
print()

selection = Maybe()
print(selection.has_value)  # False
selection.value = None
print(selection.has_value, selection.value)  # True None
