import pytest

from brno.errors import BrnoError
from brno.interpreter import run_program


def output(source, capsys):
    run_program(source)
    return capsys.readouterr().out.strip().split('\n')


def error_of(source) -> BrnoError:
    with pytest.raises(BrnoError) as exc:
        run_program(source)
    return exc.value


# Basic scenarios

def test_let_and_reassign(capsys):
    assert output('nech x = 1 piča x = x + 2 piča vyblij(x) piča', capsys) == ['3']


def test_function_call(capsys):
    assert output('rob f(a, b) { vrat a + b piča } vyblij(f(2, 3)) piča', capsys) == ['5']


def test_throw_and_catch(capsys):
    assert output('zkus { házej("e") piča } chyť (e) { vyblij(e) piča }', capsys) == ['e']


def test_undeclared_variable_fails_before_output(capsys):
    err = error_of('vyblij(y) piča vyblij("nikdy") piča')
    assert err.name == 'NameError'
    assert err.value.message == "unknown variable 'y'"
    assert capsys.readouterr().out == ''


def test_arity_error_names_both_counts():
    err = error_of('rob f(a) { vrat a piča } f(1, 2) piča')
    assert err.name == 'ArityError'
    assert err.value.message == 'f: expected 1 arguments, got 2'


def test_too_few_arguments_is_an_arity_error():
    err = error_of('rob f(a, b) { vrat a piča } f(1) piča')
    assert err.value.message == 'f: expected 2 arguments, got 1'


def test_builtin_arity_is_checked():
    err = error_of('text.malý() piča')
    assert err.name == 'ArityError'
    assert err.value.message == 'text.malý: expected 1 arguments, got 0'


def test_variadic_builtins_accept_any_count(capsys):
    source = '''
    vyblij(__arr()) piča
    vyblij(__arr(1, 2, 3, 4, 5)) piča
    vyblij(matyš.max()) piča
    vyblij(matyš.max(3, 9, 4)) piča
    '''
    assert output(source, capsys) == ['[]', '[1, 2, 3, 4, 5]', '-Infinity', '9']


# Scoping

def test_block_binding_is_invisible_after_block():
    err = error_of('{ nech x = 1 piča } vyblij(x) piča')
    assert err.name == 'NameError'


def test_shadowing_does_not_touch_outer_binding(capsys):
    source = '''
    nech x = 1 piča
    {
      nech x = 2 piča
      vyblij(x) piča
    }
    vyblij(x) piča
    '''
    assert output(source, capsys) == ['2', '1']


def test_assignment_updates_nearest_binding(capsys):
    source = '''
    nech x = 1 piča
    { x = 2 piča }
    rob zmen() { x = 3 piča }
    vyblij(x) piča
    zmen() piča
    vyblij(x) piča
    '''
    assert output(source, capsys) == ['2', '3']


def test_assignment_never_creates_a_global():
    err = error_of('rob f() { novy = 1 piča } f() piča')
    assert err.name == 'NameError'
    assert err.value.message == "unknown variable 'novy'"


def test_let_in_same_scope_rebinds(capsys):
    assert output('nech x = 1 piča nech x = "a" piča vyblij(x) piča', capsys) == ['a']


def test_for_loop_variable_is_scoped_to_loop():
    err = error_of('okruh (nech i = 0 piča i < 2 piča i++) {} vyblij(i) piča')
    assert err.name == 'NameError'


def test_parameters_shadow_globals(capsys):
    source = '''
    nech a = "venku" piča
    rob f(a) { vrat a piča }
    vyblij(f("uvnitř")) piča
    vyblij(a) piča
    '''
    assert output(source, capsys) == ['uvnitř', 'venku']


# Loops

def test_break_affects_innermost_loop_only(capsys):
    source = '''
    okruh (nech i = 0 piča i < 3 piča i++) {
      okruh (nech j = 0 piča j < 3 piča j++) {
        esli (j == 1) vypadni piča
        vyblij(i + ":" + j) piča
      }
    }
    '''
    assert output(source, capsys) == ['0:0', '1:0', '2:0']


def test_continue_affects_innermost_loop_only(capsys):
    source = '''
    nech i = 0 piča
    šalina (i < 2) {
      i++ piča
      okruh (nech j = 0 piča j < 3 piča j++) {
        esli (j == 1) přeskoč piča
        vyblij(i + ":" + j) piča
      }
    }
    '''
    assert output(source, capsys) == ['1:0', '1:2', '2:0', '2:2']


def test_continue_in_while_retests_condition(capsys):
    source = '''
    nech i = 0 piča
    šalina (i < 4) {
      i++ piča
      esli (i == 2) přeskoč piča
      vyblij(i) piča
    }
    '''
    assert output(source, capsys) == ['1', '3', '4']


def test_for_without_condition_runs_until_break(capsys):
    source = '''
    nech n = 0 piča
    okruh (piča piča n++) {
      esli (n == 3) vypadni piča
    }
    vyblij(n) piča
    '''
    assert output(source, capsys) == ['3']


def test_return_from_inside_loop(capsys):
    source = '''
    rob najdi() {
      okruh (nech i = 0 piča piča i++) {
        šalina (rožni) {
          esli (i == 3) vrat i piča
          vypadni piča
        }
      }
    }
    vyblij(najdi()) piča
    '''
    assert output(source, capsys) == ['3']


@pytest.mark.parametrize('source, message', [
    ('vrat 1 piča', "'vrat' outside a function"),
    ('vypadni piča', "'vypadni' outside a loop"),
    ('rob f() { přeskoč piča } f() piča', "'přeskoč' outside a loop"),
])
def test_stray_control_signal_is_an_error(source, message):
    err = error_of(source)
    assert err.name == 'ControlError'
    assert err.value.message == message


# try / catch / finally

def test_finally_runs_after_normal_completion(capsys):
    source = 'zkus { vyblij("tělo") piča } chyť (e) { vyblij("chyť") piča } potom { vyblij("potom") piča }'
    assert output(source, capsys) == ['tělo', 'potom']


def test_finally_runs_after_caught_error(capsys):
    source = 'zkus { házej("x") piča } chyť (e) { vyblij("chyť " + e) piča } potom { vyblij("potom") piča }'
    assert output(source, capsys) == ['chyť x', 'potom']


def test_finally_runs_and_error_still_propagates(capsys):
    err = error_of('zkus { házej("x") piča } potom { vyblij("potom") piča } vyblij("nikdy") piča')
    assert err.value == 'x'
    assert capsys.readouterr().out == 'potom\n'


def test_error_inside_catch_propagates_after_finally(capsys):
    err = error_of('zkus { házej(1) piča } chyť (e) { házej(e + 1) piča } potom { vyblij("potom") piča }')
    assert err.value == 2.0
    assert capsys.readouterr().out == 'potom\n'


def test_finally_runs_on_return(capsys):
    source = '''
    rob f() {
      zkus { vrat 1 piča } potom { vyblij("úklid") piča }
      vrat 2 piča
    }
    vyblij(f()) piča
    '''
    assert output(source, capsys) == ['úklid', '1']


def test_catch_does_not_intercept_control_signals(capsys):
    source = '''
    okruh (nech i = 0 piča i < 3 piča i++) {
      zkus { vypadni piča } chyť (e) { vyblij("chyceno") piča }
      vyblij("nikdy") piča
    }
    vyblij("konec") piča
    '''
    assert output(source, capsys) == ['konec']


def test_return_in_finally_overrides_error(capsys):
    source = '''
    rob f() {
      zkus { házej("x") piča } potom { vrat "přebito" piča }
    }
    vyblij(f()) piča
    '''
    assert output(source, capsys) == ['přebito']


def test_catch_binds_runtime_error_values(capsys):
    source = '''
    zkus { neznama() piča } chyť (e) {
      vyblij(e.name) piča
      vyblij(typ(e)) piča
      vyblij(e) piča
    }
    '''
    assert output(source, capsys) == ['NameError', 'mapa', "NameError: unknown variable 'neznama'"]


def test_any_value_can_be_thrown(capsys):
    source = '''
    zkus { házej(__obj("kod", 7)) piča } chyť (e) { vyblij(e.kod) piča }
    zkus { házej(null) piča } chyť (e) { vyblij(e) piča }
    '''
    assert output(source, capsys) == ['7', 'null']


def test_catch_scope_is_separate(capsys):
    source = '''
    nech e = "vnější" piča
    zkus { házej("vnitřní") piča } chyť (e) { vyblij(e) piča }
    vyblij(e) piča
    '''
    assert output(source, capsys) == ['vnitřní', 'vnější']


# Deep recursion

def test_deep_recursion(capsys):
    source = '''
    rob suma(n) {
        esli (n == 0) vrat 0 piča
        vrat n + suma(n - 1) piča
    }
    vyblij(suma(1000)) piča
    '''
    assert output(source, capsys) == ['500500']


def test_runaway_recursion_is_catchable(capsys):
    source = '''
    rob f() { vrat f() piča }
    zkus { f() piča } chyť (e) { vyblij(e.name) piča } potom { vyblij("konec") piča }
    vyblij("dál") piča
    '''
    assert output(source, capsys) == ['RangeError', 'konec', 'dál']


def test_uncaught_runaway_recursion_is_a_script_error():
    err = error_of('rob f() { vrat f() piča } f() piča')
    assert err.name == 'RangeError'
    assert err.value.message == 'maximum call depth exceeded'
