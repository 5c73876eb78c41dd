"""Export league standings and rosters to an Excel workbook."""

import logging
from pathlib import Path
from typing import Mapping

import openpyxl

from .constants import STATUS_DROPPED, STATUS_ELIMINATED
from .models import RosterEntry

logger = logging.getLogger('sfl.excel_export')


def format_entry_for_excel(entry: RosterEntry, names: Mapping[str, str] | None = None) -> str:
    """Format a roster entry as 'Name (pts)', flagging eliminated castaways."""
    name = (names or {}).get(entry.castaway_id, entry.castaway_id)
    label = f'{name} ({entry.accumulated_points})'
    if entry.status == STATUS_ELIMINATED:
        label += ' [out]'
    return label


def _sheet(wb, title: str):
    if title in wb.sheetnames:
        ws = wb[title]
        ws.delete_rows(1, ws.max_row)
        return ws
    return wb.create_sheet(title)


def export_league_workbook(
    excel_path: str | Path,
    standings: Mapping[str, int],
    rosters: Mapping[str, list[RosterEntry]],
    names: Mapping[str, str] | None = None,
    roster_size: int = 5,
) -> Path:
    """
    Write a Standings sheet and a Rosters sheet.

    The Rosters layout has one column per user and one row per slot, with
    dropped castaways listed under a separate heading. Existing sheets with
    the same names are cleared; other sheets in the workbook are kept.

    Args:
        excel_path: Workbook to write (created if it doesn't exist)
        standings: user_id -> total points, in ranking order
        rosters: user_id -> live roster
        names: castaway_id -> display name
        roster_size: Number of slot rows to write

    Returns:
        Path of the saved workbook
    """
    excel_path = Path(excel_path)

    if excel_path.exists():
        wb = openpyxl.load_workbook(str(excel_path))
    else:
        wb = openpyxl.Workbook()
        wb.remove(wb.active)

    ws = _sheet(wb, 'Standings')
    ws.cell(row=1, column=1, value='Rank')
    ws.cell(row=1, column=2, value='User')
    ws.cell(row=1, column=3, value='Points')
    for rank, (user_id, points) in enumerate(standings.items(), start=1):
        ws.cell(row=rank + 1, column=1, value=rank)
        ws.cell(row=rank + 1, column=2, value=user_id)
        ws.cell(row=rank + 1, column=3, value=points)

    ws = _sheet(wb, 'Rosters')
    users = list(standings) + sorted(u for u in rosters if u not in standings)
    ws.cell(row=1, column=1, value='Slot')
    for col_idx, user_id in enumerate(users, start=2):
        ws.cell(row=1, column=col_idx, value=user_id)

    for slot in range(roster_size):
        row = slot + 2
        ws.cell(row=row, column=1, value=f'Slot {slot + 1}')
        for col_idx, user_id in enumerate(users, start=2):
            held = [e for e in rosters.get(user_id, []) if e.status != STATUS_DROPPED]
            if slot < len(held):
                ws.cell(row=row, column=col_idx, value=format_entry_for_excel(held[slot], names))

    row = roster_size + 3
    ws.cell(row=row, column=1, value='DROPPED')
    dropped = {
        user_id: [e for e in rosters.get(user_id, []) if e.status == STATUS_DROPPED]
        for user_id in users
    }
    for slot in range(max((len(v) for v in dropped.values()), default=0)):
        row += 1
        for col_idx, user_id in enumerate(users, start=2):
            if slot < len(dropped[user_id]):
                ws.cell(
                    row=row, column=col_idx, value=format_entry_for_excel(dropped[user_id][slot], names)
                )

    wb.save(str(excel_path))
    wb.close()

    logger.info(f'League workbook written to {excel_path}')
    return excel_path
