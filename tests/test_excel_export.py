"""Tests for the Excel workbook export."""

import openpyxl

from sfl.excel_export import export_league_workbook, format_entry_for_excel
from sfl.models import RosterEntry


def rosters():
    return {
        'alice': [
            RosterEntry('c1', accumulated_points=6),
            RosterEntry('c2', status='eliminated', eliminated_week=3, accumulated_points=-10),
            RosterEntry('c5', status='dropped', dropped_week=2, accumulated_points=5),
        ],
        'bob': [RosterEntry('c6', accumulated_points=1)],
    }


class TestFormatting:
    def test_active(self):
        assert format_entry_for_excel(RosterEntry('c1', accumulated_points=6), {'c1': 'Rachel'}) == 'Rachel (6)'

    def test_eliminated_flag(self):
        entry = RosterEntry('c2', status='eliminated', eliminated_week=3, accumulated_points=-10)
        assert format_entry_for_excel(entry) == 'c2 (-10) [out]'


class TestExport:
    """Tests for the workbook layout."""

    def test_new_workbook(self, tmp_path):
        path = export_league_workbook(
            tmp_path / 'league.xlsx', {'alice': 1, 'bob': 1}, rosters(), roster_size=2
        )
        wb = openpyxl.load_workbook(path)
        assert wb.sheetnames == ['Standings', 'Rosters']

        standings = wb['Standings']
        assert [c.value for c in standings[1]] == ['Rank', 'User', 'Points']
        assert [c.value for c in standings[2]] == [1, 'alice', 1]

        ws = wb['Rosters']
        assert ws.cell(row=1, column=2).value == 'alice'
        assert ws.cell(row=2, column=2).value == 'c1 (6)'
        assert ws.cell(row=3, column=2).value == 'c2 (-10) [out]'
        assert ws.cell(row=2, column=3).value == 'c6 (1)'
        assert ws.cell(row=5, column=1).value == 'DROPPED'
        assert ws.cell(row=6, column=2).value == 'c5 (5)'

    def test_existing_sheets_kept(self, tmp_path):
        path = tmp_path / 'league.xlsx'
        wb = openpyxl.Workbook()
        wb.active.title = 'Notes'
        wb.active['A1'] = 'keep me'
        wb.save(path)

        export_league_workbook(path, {'alice': 1}, rosters())
        export_league_workbook(path, {'alice': 2}, rosters())

        wb = openpyxl.load_workbook(path)
        assert wb['Notes']['A1'].value == 'keep me'
        assert wb['Standings'].cell(row=2, column=3).value == 2
        assert wb['Standings'].max_row == 2
