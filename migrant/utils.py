import re

import sqlparse


multiple_spaces = re.compile(r"\s+", re.MULTILINE)


def reformat_sql(script: str) -> str:
    return sqlparse.format(
        script,
        keyword_case="lower",
        identifier_case="lower",
        strip_comments=True,
        reindent=True,
        reindent_aligned=True,
        use_space_around_operators=True,
        indent_tabs=False,
        indent_width=2,
        comma_first=True,
    ).strip()


def one_line(script: str) -> str:
    return multiple_spaces.sub(" ", script).strip()
