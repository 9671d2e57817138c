"""Tests for the command-line entry point."""

import argparse
import json

import pytest

from dotgrid.cli import _region, build_parser, main
from dotgrid.render import Axis, Region
from test_data import NON_UTF8_FASTA


def test_main_writes_image_and_prints_alignments(tmp_path, capsys):
    output = tmp_path / 'out.png'
    status = main(['-n', '2', 'ACTG', 'ACTG', str(output)])
    assert status == 0
    assert output.exists()
    report = json.loads(capsys.readouterr().out)
    assert report == [{'sequence': 'ACTG', 'position': {'x': 0, 'y': 0}}]


def test_main_min_length_one_prints_empty_report(tmp_path, capsys):
    status = main(['-n', '1', 'ACTG', 'ACTG', str(tmp_path / 'out.png')])
    assert status == 0
    assert json.loads(capsys.readouterr().out) == []


def test_main_wrong_argument_count(tmp_path):
    assert main(['ACTG', 'ACTG']) == 1
    assert main(['A', 'C', str(tmp_path / 'o.png'), 'extra']) == 1


def test_main_unwritable_output(tmp_path, capsys):
    status = main(['ACTG', 'ACTG', str(tmp_path / 'missing' / 'out.png')])
    assert status == 2
    assert "Can't create" in capsys.readouterr().err


def test_main_missing_filter_file(tmp_path, write_weights, capsys):
    x = write_weights('x.txt', [0.5] * 4)
    status = main(['-x', x, '-y', str(tmp_path / 'nope.txt'), 'ACTG', 'ACTG', str(tmp_path / 'o.png')])
    assert status == 3
    assert "Can't open filter values file(s)" in capsys.readouterr().err


def test_main_filter_size_mismatch(tmp_path, write_weights, capsys):
    x = write_weights('x.txt', [0.5] * 3)
    y = write_weights('y.txt', [0.5] * 4)
    status = main(['-x', x, '-y', y, 'ACTG', 'ACTG', str(tmp_path / 'o.png')])
    assert status == 4
    assert 'Unequal dimension size' in capsys.readouterr().err


def test_main_two_filter_rounds(tmp_path, write_weights, capsys):
    args = [
        '-n', '2',
        '-x', write_weights('x.txt', [0.5] * 4),
        '-y', write_weights('y.txt', [0.5] * 4),
        '-p', write_weights('p.txt', [1.0] * 4),
        '-q', write_weights('q.txt', [1.0] * 4),
        'ACTG', 'ACTG', str(tmp_path / 'o.png'),
    ]
    assert main(args) == 0
    assert len(json.loads(capsys.readouterr().out)) == 1


def test_main_fasta_input(tmp_path, capsys):
    a = tmp_path / 'a.fasta'
    b = tmp_path / 'b.fasta'
    a.write_text('>a\nACTG\n')
    b.write_text('>b\nACTG\n')
    status = main(['--fasta', '-n', '3', str(a), str(b), str(tmp_path / 'o.png')])
    assert status == 0
    assert json.loads(capsys.readouterr().out)[0]['sequence'] == 'ACTG'


def test_main_missing_fasta(tmp_path, capsys):
    status = main(['--fasta', str(tmp_path / 'a.fa'), str(tmp_path / 'b.fa'), str(tmp_path / 'o.png')])
    assert status == 3
    assert "Can't open sequence file(s)" in capsys.readouterr().err


def test_main_indent(tmp_path, capsys):
    main(['-n', '2', '--indent', '2', 'ACTG', 'ACTG', str(tmp_path / 'o.png')])
    assert '\n  {' in capsys.readouterr().out


def test_parser_defaults():
    args = build_parser().parse_args(['A', 'C', 'out.png'])
    assert args.min_length == 5
    assert (args.width, args.height) == (2000, 2000)
    assert args.regions == []
    assert not args.fasta


def test_region_argument():
    assert _region('x:1:2') == Region(Axis.X, 1, 2)
    assert _region('Y:0:10:red') == Region(Axis.Y, 0, 10, 'red')


@pytest.mark.parametrize('text', ['x:1', 'z:1:2', 'x:a:2'])
def test_region_argument_invalid(text):
    with pytest.raises(argparse.ArgumentTypeError):
        _region(text)


def test_main_unknown_output_extension_writes_png(tmp_path, capsys):
    output = tmp_path / 'plot.out'
    assert main(['-n', '2', 'ACTG', 'ACTG', str(output)]) == 0
    assert output.read_bytes()[:8] == b'\x89PNG\r\n\x1a\n'
    assert json.loads(capsys.readouterr().out)[0]['sequence'] == 'ACTG'


def test_main_fasta_non_utf8_bytes(tmp_path, capsys):
    path = tmp_path / 'bytes.fasta'
    path.write_bytes(NON_UTF8_FASTA)
    status = main(['--fasta', '-n', '3', str(path), str(path), str(tmp_path / 'o.png')])
    assert status == 0
    assert json.loads(capsys.readouterr().out)[0]['sequence'] == 'AC\xff\xfeGT'


def test_main_undecodable_weight_file(tmp_path, write_weights, capsys):
    binary = tmp_path / 'binary.txt'
    binary.write_bytes(b'\xff\xfe\n')
    x = write_weights('x.txt', [0.5] * 4)
    status = main(['-x', x, '-y', str(binary), 'ACTG', 'ACTG', str(tmp_path / 'o.png')])
    assert status == 3
