from rich.pretty import pprint

from clparse import *


class Settings:
    verbose: bool = Switch("v", "verbose", "print more")
    count: int = Value("n", "count", "repeat count", type=int, default=1)


if __name__ == '__main__':
    settings = Settings()
    parser = CommandLineParser(shell=True, accept_additional=True)
    parser.extract_argument_attributes(settings)
    parser.parse()
    parser.show_parsed_arguments()
    pprint(parser.arguments)
