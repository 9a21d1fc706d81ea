import asyncio

import pytest

from brno.errors import BrnoError
from brno.interpreter import Interpreter
from brno.parser import parse_program


def memory_loader(files, log=None):
    async def load(path):
        if log is not None:
            log.append(path)
        await asyncio.sleep(0)
        if path not in files:
            raise FileNotFoundError(f"no such module: {path}")
        return files[path]
    return load


async def run(source, files=None, compile=parse_program, log=None):
    loader = memory_loader(files, log) if files is not None else None
    interp = Interpreter(loader=loader, compile=compile)
    await interp.run(parse_program(source))
    return interp


@pytest.mark.asyncio
async def test_reimport_executes_again(capsys):
    files = {'pocitej.brno': 'pocet = pocet + 1 piča'}
    interp = await run('nech pocet = 0 piča vokno "pocitej.brno" piča vokno "pocitej.brno" piča', files)
    assert interp.globals['pocet'] == 2.0


@pytest.mark.asyncio
async def test_imported_definitions_merge_into_importing_scope(capsys):
    files = {'lib.brno': 'nech pozdrav = "ahoj" piča rob dvakrat(x) { vrat x * 2 piča }'}
    source = '''
    vokno "lib.brno" piča
    vyblij(pozdrav) piča
    vyblij(dvakrat(21)) piča
    '''
    await run(source, files)
    assert capsys.readouterr().out == 'ahoj\n42\n'


@pytest.mark.asyncio
async def test_import_inside_block_stays_in_block():
    files = {'lib.brno': 'nech skryte = 1 piča'}
    with pytest.raises(BrnoError) as exc:
        await run('{ vokno "lib.brno" piča } vyblij(skryte) piča', files)
    assert exc.value.name == 'NameError'


@pytest.mark.asyncio
async def test_imported_source_sees_importer_bindings(capsys):
    files = {'lib.brno': 'vyblij(jmeno) piča'}
    await run('rob f(jmeno) { vokno "lib.brno" piča } f("Brno") piča', files)
    assert capsys.readouterr().out == 'Brno\n'


@pytest.mark.asyncio
async def test_return_in_imported_source_returns_from_importer(capsys):
    files = {'lib.brno': 'vrat 5 piča'}
    await run('rob f() { vokno "lib.brno" piča vrat 1 piča } vyblij(f()) piča', files)
    assert capsys.readouterr().out == '5\n'


@pytest.mark.asyncio
async def test_path_can_be_an_expression():
    log = []
    files = {'moduly/a.brno': 'nech a = 1 piča'}
    interp = await run('nech adresar = "moduly/" piča vokno adresar + "a" + ".brno" piča', files, log=log)
    assert log == ['moduly/a.brno']
    assert interp.globals['a'] == 1.0


@pytest.mark.asyncio
async def test_non_string_path_is_a_type_error():
    with pytest.raises(BrnoError) as exc:
        await run('vokno 42 piča', {})
    assert exc.value.name == 'TypeError'


@pytest.mark.asyncio
async def test_missing_loader():
    with pytest.raises(BrnoError) as exc:
        await run('vokno "a.brno" piča')
    assert exc.value.name == 'ImportError'
    assert 'no loader' in exc.value.value.message


@pytest.mark.asyncio
async def test_missing_compile_function():
    with pytest.raises(BrnoError) as exc:
        await run('vokno "a.brno" piča', {'a.brno': ''}, compile=None)
    assert exc.value.name == 'ImportError'
    assert exc.value.value.message == 'no compile function configured'


@pytest.mark.asyncio
async def test_loader_failure_is_catchable(capsys):
    source = '''
    zkus { vokno "chybi.brno" piča } chyť (e) {
      vyblij(e.name) piča
      vyblij(e.message) piča
    }
    '''
    await run(source, {})
    assert capsys.readouterr().out == "ImportError\ncannot load 'chybi.brno': no such module: chybi.brno\n"


@pytest.mark.asyncio
async def test_syntax_error_in_imported_source(capsys):
    files = {'rozbite.brno': 'nech x = piča'}
    await run('zkus { vokno "rozbite.brno" piča } chyť (e) { vyblij(e.name) piča }', files)
    assert capsys.readouterr().out == 'SyntaxError\n'


@pytest.mark.asyncio
async def test_nested_imports_run_in_order(capsys):
    files = {
        'a.brno': 'vyblij("a začátek") piča vokno "b.brno" piča vyblij("a konec") piča',
        'b.brno': 'vyblij("b") piča',
    }
    await run('vokno "a.brno" piča vyblij("hlavní") piča', files)
    assert capsys.readouterr().out == 'a začátek\nb\na konec\nhlavní\n'
