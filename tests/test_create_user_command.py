from networks.models import User


def test_create_user_command(app):
    runner = app.test_cli_runner()

    result = runner.invoke(args=[
        'create-user', '--email', 'Admin@Example.com', '--display-name', 'Admin',
        '--password', 'secret'
    ])

    assert 'Successfully created user: Admin' in result.output
    with app.app_context():
        user = User.query.filter_by(email='admin@example.com').first()
        assert user is not None
        assert user.check_password('secret')


def test_create_user_command_rejects_duplicate(app, alice):
    runner = app.test_cli_runner()

    result = runner.invoke(args=[
        'create-user', '--email', alice.email, '--display-name', 'Copy', '--password', 'x'
    ])

    assert 'already exists' in result.output
    with app.app_context():
        assert User.query.filter_by(email=alice.email).count() == 1
