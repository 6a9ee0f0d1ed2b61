from rich.pretty import pprint

from termline import *

__styles__ = {
    "prog-name": "bold magenta",
}


def greet(name, shout, debug):
    def action():
        if debug:
            pprint({"name": name, "shout": shout})
        message = "hello %s" % name
        print(message.upper() if shout else message)
    return action


def count(start, stop, debug):
    def action():
        if debug:
            pprint({"start": start, "stop": stop})
        print(*range(start, stop))
    return action


debug = flag("-d", "--debug", section="COMMON OPTIONS", doc="Dump the evaluated arguments.")

greeting = lift(
    greet,
    positional(0, docv="NAME", default="world", doc="Who to greet."),
    flag("-s", "--shout", doc="Greet in capitals."),
    debug,
)

counting = lift(
    count,
    option("--from", type=int, default=0, docv="N", doc="Start counting at $(docv)."),
    positional(0, type=int, docv="STOP", required=True, doc="Stop before $(docv)."),
    debug,
)

usage = lift(lambda debug: lambda: print("try 'demo --help'"), debug)

if __name__ == '__main__':
    run_choice(
        (usage, TermInfo("demo", version="1.0", doc="A termline demonstration.")),
        [
            (greeting, TermInfo("greet", doc="Print a greeting.")),
            (counting, TermInfo("count", doc="Print numbers.", man=(
                Section("EXAMPLES"),
                Paragraph("$(b,$(mname) $(tname) --from=2 5) prints 2 3 4."),
            ))),
        ],
    )
