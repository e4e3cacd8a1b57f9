"""Integration tests for observable objects working together."""

import logging

import pytest

from nectar import Maybe, NotifyingProperty, Observable, observed, prop, registry


class Base(Observable):
    name = prop("")


class Middle(Base):
    size = prop(0)


class Leaf(Middle):
    color = prop("red")

    @observed
    def label(self):
        return f"{self.name}:{self.color}"


class Branch(Middle):
    weight = prop(1.0)


@pytest.mark.integration
def test_point_scenario():
    """Listening on one Point is not affected by another Point"""

    class Point(Observable):
        x = prop(0)
        y = prop(0)

    log = []
    p = Point()
    p.listen_to(p, "change:x", log.append)
    p.x = 3

    assert log == [3]

    p2 = Point()
    p2.x = 4

    assert log == [3]


@pytest.mark.integration
def test_inherited_attributes_notify_exactly_once():
    """Attributes declared anywhere in the chain notify once per assignment"""
    leaves = [Leaf() for _ in range(5)]
    branches = [Branch() for _ in range(5)]
    leaf, branch = leaves[0], branches[0]
    events = []
    leaf.listen_to(leaf, "change", lambda name, value: events.append((name, value)))
    branch.listen_to(branch, "change", lambda name, value: events.append((name, value)))

    leaf.name = "leaf"
    leaf.size = 2
    leaf.color = "blue"
    branch.name = "branch"
    branch.weight = 2.5

    assert events == [
        ("name", "leaf"),
        ("size", 2),
        ("color", "blue"),
        ("name", "branch"),
        ("weight", 2.5),
    ]


@pytest.mark.integration
def test_registry_paths_follow_the_declaration_chain():
    """Each chain link is recorded under its full qualified path"""
    Leaf()
    Branch()

    assert sorted(registry.paths()) == [
        "Base",
        "Base#Middle",
        "Base#Middle#Branch",
        "Base#Middle#Leaf",
    ]
    assert isinstance(vars(Base)["name"], NotifyingProperty)


@pytest.mark.integration
def test_props_cover_the_chain_and_skip_getter_only_attributes():
    """props() unions the chain and leaves out read-only attributes"""
    leaf = Leaf()
    leaf.name = "n"

    assert leaf.props() == ["color", "size", "name"]
    assert leaf.to_dict() == {"color": "red", "size": 0, "name": "n"}
    assert leaf.label == "n:red"


@pytest.mark.integration
def test_overridden_attribute_in_subclass_notifies_once():
    """A subclass redeclaring an inherited attribute does not double notify"""

    class Item(Observable):
        price = prop(0)

    class DiscountedItem(Item):
        price = prop(0, validate=lambda v: v >= 0)

    Item()
    item = DiscountedItem()
    calls = []
    item.listen_to(item, "change:price", calls.append)

    item.price = 10
    item.price = -1

    assert calls == [10]
    assert item.props() == ["price"]


@pytest.mark.integration
def test_diamond_inheritance_wraps_each_link_once():
    """Diamond hierarchies visit the shared ancestor once"""

    class Named(Observable):
        name = prop("")

    class Sized(Named):
        size = prop(0)

    class Colored(Named):
        color = prop("")

    class Swatch(Sized, Colored):
        pass

    swatch = Swatch()
    events = []
    swatch.listen_to(swatch, "change", lambda name, value: events.append(name))

    swatch.name = "s"
    swatch.size = 1
    swatch.color = "teal"

    assert events == ["name", "size", "color"]
    assert swatch.props() == ["size", "color", "name"]


@pytest.mark.integration
def test_view_follows_model_until_it_stops_listening():
    """A view re-renders on model changes while visible and can detach"""

    class TodoItem(Observable):
        title = prop("")
        done = prop(False)

    class TodoView(Observable):
        visible = prop(True)

        def __init__(self, model):
            super().__init__()
            self.model = model
            self.rendered = []
            self.listen_to(model, "change", self.render)
            self.listen_to(model, "change:done:True", self.celebrate)

        def render(self, name, value):
            if self.visible:
                self.rendered.append(f"{name}={value}")

        def celebrate(self):
            self.rendered.append("done!")

    item = TodoItem()
    view = TodoView(item)

    item.title = "write tests"
    item.done = True
    view.stop_listening(item)
    item.title = "ignored"

    assert view.rendered == ["title=write tests", "done=True", "done!"]


@pytest.mark.integration
def test_listeners_can_chain_changes_between_objects():
    """A listener may assign other observables from inside a callback"""

    class Celsius(Observable):
        degrees = prop(0.0)

    class Fahrenheit(Observable):
        degrees = prop(32.0)

    c, f = Celsius(), Fahrenheit()
    f.listen_to(c, "change:degrees", lambda v: setattr(f, "degrees", v * 9 / 5 + 32))
    seen = []
    c.listen_to(f, "change:degrees", seen.append)

    c.degrees = 100.0

    assert f.degrees == 212.0
    assert seen == [212.0]


@pytest.mark.integration
def test_once_listener_with_guard_on_other_object():
    """A guarded once listener on another object fires when the guard holds"""

    class Connection(Observable):
        ready = prop(False)
        status = prop("idle")

    class Client(Observable):
        def __init__(self, connection):
            super().__init__()
            self.sent = Maybe()
            self.listen_to_once(connection, "change:status&&ready", self.send)

        def send(self, status):
            self.sent.value = status

    connection = Connection()
    client = Client(connection)

    connection.status = "connecting"
    assert not client.sent.has_value

    connection.ready = True
    connection.status = "open"
    connection.status = "closed"

    assert client.sent.value == "open"


@pytest.mark.integration
def test_validation_rejection_is_logged_and_flow_continues(caplog):
    """Rejected values are logged while later assignments still work"""

    class Slider(Observable):
        position = prop(0, validate=lambda v: isinstance(v, int) and 0 <= v <= 10)

    slider = Slider()
    positions = []
    slider.listen_to(slider, "change:position", positions.append)

    with caplog.at_level(logging.ERROR):
        slider.position = "far"
        slider.position = 4

    assert positions == [4]
    assert "Invalid value 'far' for 'position'" in caplog.text
