"""learnstream: command line client for the LearnStream API.

Usage examples:
  learnstream register --name Ann --email ann@x.com
  learnstream login --email ann@x.com
  learnstream classes --type live --search intro
  learnstream enroll <class-id>
  learnstream admin dashboard
"""
import argparse
import getpass
import json
import sys

from client import forms, views
from client.api import ApiClient, ApiClientError, SessionExpired
from client.session import NotLoggedIn


def _password(args, prompt='Password: '):
    return args.password if args.password is not None else getpass.getpass(prompt)


def cmd_register(client, args, out):
    password = _password(args)
    confirm = args.confirm if args.confirm is not None else getpass.getpass('Confirm password: ')
    data = forms.check_registration(args.name, args.email, password, confirm)
    result = client.register(**data)
    print(f"Welcome, {result['user']['name']}! You are logged in.", file=out)


def cmd_login(client, args, out):
    data = forms.check_login(args.email, _password(args))
    result = client.login(**data)
    print(f"Logged in as {result['user']['name']} ({result['user']['role']}).", file=out)


def cmd_logout(client, args, out):
    client.logout()
    print("Logged out.", file=out)


def cmd_me(client, args, out):
    print(views.render_user(client.get_me()), file=out)


def cmd_profile(client, args, out):
    changes = {}
    if args.name is not None:
        changes['name'] = args.name
    if args.picture is not None:
        changes['profilePicture'] = args.picture
    if not changes:
        raise forms.FormError(['Nothing to update'])
    print(views.render_user(client.update_me(changes)), file=out)


def cmd_classes(client, args, out):
    classes = client.get_classes(type=args.type, category=args.category,
                                 search=args.search, limit=args.limit)
    print(views.render_class_list(classes), file=out)


def cmd_stats(client, args, out):
    print(views.render_stats(client.get_stats()), file=out)


def cmd_show(client, args, out):
    print(views.render_class(client.get_class(args.class_id)), file=out)


def cmd_enroll(client, args, out):
    print(client.enroll(args.class_id)['message'], file=out)


def cmd_my_classes(client, args, out):
    print(views.render_class_list(client.get_my_classes()), file=out)


def _class_payload(args, partial):
    active = None
    if args.active:
        active = True
    elif args.inactive:
        active = False
    return forms.class_form(
        title=args.title, description=args.description, instructor=args.instructor,
        class_type=args.type, video_url=args.video_url, thumbnail=args.thumbnail,
        duration=args.duration, category=args.category, schedule=args.schedule,
        active=active, partial=partial,
    )


def cmd_admin_dashboard(client, args, out):
    print(views.render_dashboard(client.get_dashboard()), file=out)


def cmd_admin_classes(client, args, out):
    print(views.render_class_list(client.admin_get_classes()), file=out)


def cmd_admin_class_create(client, args, out):
    created = client.create_class(_class_payload(args, partial=False))
    print(f"Created class {created['_id']}.", file=out)


def cmd_admin_class_update(client, args, out):
    updated = client.update_class(args.class_id, _class_payload(args, partial=True))
    print(views.render_class(updated), file=out)


def cmd_admin_class_delete(client, args, out):
    print(client.delete_class(args.class_id)['message'], file=out)


def cmd_admin_users(client, args, out):
    print(views.render_users(client.get_users()), file=out)


def cmd_admin_user_update(client, args, out):
    payload = forms.user_form(name=args.name, email=args.email, role=args.role)
    updated = client.update_user(args.user_id, payload)
    print(views.render_user(updated), file=out)


def cmd_admin_user_delete(client, args, out):
    print(client.delete_user(args.user_id)['message'], file=out)


def cmd_admin_setup(client, args, out):
    password = _password(args)
    data = forms.check_registration(args.name, args.email, password, password)
    print(client.setup_admin(**data)['message'], file=out)


def _add_class_fields(parser):
    parser.add_argument('--title')
    parser.add_argument('--description')
    parser.add_argument('--instructor')
    parser.add_argument('--type', choices=['live', 'recorded'])
    parser.add_argument('--video-url')
    parser.add_argument('--thumbnail')
    parser.add_argument('--duration')
    parser.add_argument('--category')
    parser.add_argument('--schedule', help='ISO-8601 datetime, required for live classes')
    state = parser.add_mutually_exclusive_group()
    state.add_argument('--active', action='store_true')
    state.add_argument('--inactive', action='store_true')


def build_parser():
    parser = argparse.ArgumentParser(prog='learnstream', description='LearnStream command line client')
    parser.add_argument('--api-url', help='API base URL (default: $LEARNSTREAM_API_URL)')
    parser.add_argument('--json', action='store_true', help='print raw JSON for read commands')
    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('register', help='create a student account')
    p.add_argument('--name', required=True)
    p.add_argument('--email', required=True)
    p.add_argument('--password')
    p.add_argument('--confirm')
    p.set_defaults(func=cmd_register, auth=False)

    p = sub.add_parser('login')
    p.add_argument('--email', required=True)
    p.add_argument('--password')
    p.set_defaults(func=cmd_login, auth=False)

    p = sub.add_parser('logout')
    p.set_defaults(func=cmd_logout, auth=False)

    p = sub.add_parser('me', help='show your profile')
    p.set_defaults(func=cmd_me, auth=True, raw=lambda c, a: c.get_me())

    p = sub.add_parser('profile', help='edit your name or picture')
    p.add_argument('--name')
    p.add_argument('--picture')
    p.set_defaults(func=cmd_profile, auth=True)

    p = sub.add_parser('classes', help='browse active classes')
    p.add_argument('--type', choices=['live', 'recorded'])
    p.add_argument('--category')
    p.add_argument('--search')
    p.add_argument('--limit', type=int)
    p.set_defaults(func=cmd_classes, auth=True,
                   raw=lambda c, a: c.get_classes(type=a.type, category=a.category,
                                                  search=a.search, limit=a.limit))

    p = sub.add_parser('stats')
    p.set_defaults(func=cmd_stats, auth=True, raw=lambda c, a: c.get_stats())

    p = sub.add_parser('show', help='show one class (counts as a view)')
    p.add_argument('class_id')
    p.set_defaults(func=cmd_show, auth=True, raw=lambda c, a: c.get_class(a.class_id))

    p = sub.add_parser('enroll')
    p.add_argument('class_id')
    p.set_defaults(func=cmd_enroll, auth=True)

    p = sub.add_parser('my-classes')
    p.set_defaults(func=cmd_my_classes, auth=True, raw=lambda c, a: c.get_my_classes())

    admin = sub.add_parser('admin', help='administration').add_subparsers(dest='admin_command', required=True)

    p = admin.add_parser('dashboard')
    p.set_defaults(func=cmd_admin_dashboard, auth=True, admin=True, raw=lambda c, a: c.get_dashboard())

    classes = admin.add_parser('classes')
    classes.set_defaults(func=cmd_admin_classes, auth=True, admin=True, raw=lambda c, a: c.admin_get_classes())
    class_cmds = classes.add_subparsers(dest='class_command')
    p = class_cmds.add_parser('create')
    _add_class_fields(p)
    p.set_defaults(func=cmd_admin_class_create, raw=None)
    p = class_cmds.add_parser('update')
    p.add_argument('class_id')
    _add_class_fields(p)
    p.set_defaults(func=cmd_admin_class_update, raw=None)
    p = class_cmds.add_parser('delete')
    p.add_argument('class_id')
    p.set_defaults(func=cmd_admin_class_delete, raw=None)

    users = admin.add_parser('users')
    users.set_defaults(func=cmd_admin_users, auth=True, admin=True, raw=lambda c, a: c.get_users())
    user_cmds = users.add_subparsers(dest='user_command')
    p = user_cmds.add_parser('update')
    p.add_argument('user_id')
    p.add_argument('--name')
    p.add_argument('--email')
    p.add_argument('--role', choices=['student', 'admin'])
    p.set_defaults(func=cmd_admin_user_update, raw=None)
    p = user_cmds.add_parser('delete')
    p.add_argument('user_id')
    p.set_defaults(func=cmd_admin_user_delete, raw=None)

    p = admin.add_parser('setup', help='create the first admin (first run only)')
    p.add_argument('--name', required=True)
    p.add_argument('--email', required=True)
    p.add_argument('--password')
    p.set_defaults(func=cmd_admin_setup, auth=False, admin=False)

    return parser


def main(argv=None, client=None, out=None, err=None):
    out = out or sys.stdout
    err = err or sys.stderr
    args = build_parser().parse_args(argv)
    client = client or ApiClient(base_url=args.api_url)

    try:
        if getattr(args, 'auth', False):
            session = client.store.require()
            if getattr(args, 'admin', False) and session['user'].get('role') != 'admin':
                print("Admin access required.", file=err)
                return 1
        raw = getattr(args, 'raw', None)
        if args.json and raw is not None:
            print(json.dumps(raw(client, args), indent=2), file=out)
        else:
            args.func(client, args, out)
    except forms.FormError as e:
        for message in e.errors:
            print(f"error: {message}", file=err)
        return 2
    except NotLoggedIn as e:
        print(str(e), file=err)
        return 1
    except SessionExpired as e:
        print(f"{e.message}. Run `learnstream login`.", file=err)
        return 1
    except ApiClientError as e:
        print(f"error: {e.message}", file=err)
        for field_error in e.errors:
            print(f"  {field_error.get('field', '?')}: {field_error.get('message')}", file=err)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
