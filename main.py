from rich.pretty import pprint

from arbor import *


def callback(arguments, options):
    """Simple tool"""
    pprint(arguments)
    pprint(options)


def test(arguments, options):
    """Run the tests"""
    pprint(options)


root = (
    Group(callback)
    .add_option(Option("the-truth", Kind.INT, "t", default=42, descr="The truth about everything"))
    .add_argument(Argument(Kind.STR, descr="Test text"))
    .add_child("test", Group(test), "t")
)


if __name__ == '__main__':
    parse_from_environment(root, shell=True, fancy=True, colorful=True)
