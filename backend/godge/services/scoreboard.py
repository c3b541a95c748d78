from html import escape

from godge.services.coordinator import Scoreboard

PAGE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>Scoreboard</title>
<style>
table {{ border-collapse: collapse; }}
th, td {{ border: 1px solid #999; padding: 4px 10px; }}
td.Succeeded {{ background: #c8f7c5; }}
td.Failed {{ background: #f7c5c5; }}
</style>
</head>
<body>
<h1>Scoreboard</h1>
<table>
<tr><th>User</th>{header}</tr>
{rows}
</table>
</body>
</html>
"""


def render_scoreboard(board: Scoreboard) -> str:
    header = "".join(f"<th>{escape(t)}</th>" for t in board.tasks)
    rows = []
    for u in board.users:
        cells = []
        for t in board.tasks:
            status = board.cells[u][t]
            cells.append(f'<td class="{status}">{escape(status)}</td>')
        rows.append(f"<tr><td>{escape(u)}</td>{''.join(cells)}</tr>")
    return PAGE.format(header=header, rows="\n".join(rows))
