import argparse
import logging
import sys

from dh_exchange import config, dh_basic, dh_mitm_demo, x3dh
from dh_exchange.errors import InvalidInputError, ProtocolError
from dh_exchange.keys import DomainParameters, rotate_parameters, with_generator, with_prime

# Text front end: `python -m dh_exchange <command>`

def _cmd_dh(args):
    exchange = dh_basic.Exchange.default()
    if args.p is not None:
        exchange = dh_basic.change_prime(exchange, args.p)
    if args.g is not None:
        exchange = dh_basic.change_generator(exchange, args.g)
    if args.a is not None:
        exchange = dh_basic.set_private_key(exchange, "supplier", args.a)
    if args.b is not None:
        exchange = dh_basic.set_private_key(exchange, "mill", args.b)
    dh_basic.demo(exchange)

def _cmd_rotate(args):
    exchange = dh_basic.rotate(dh_basic.Exchange.default())
    params = exchange.params
    print(f"p = {params.p}")
    print(f"g = {params.g}" + ("" if params.verified else "  (UNVERIFIED fallback)"))

def _pick(value, key_pair):
    return value if value is not None else key_pair.private_key

# per-key "generate" actions: (party, rotation helper)
_GENERATE = {
    "ik-a": ("supplier", x3dh.rotate_identity_key),
    "spk-a": ("supplier", x3dh.rotate_signed_pre_key),
    "ek-a": ("supplier", x3dh.rotate_ephemeral_key),
    "ik-b": ("mill", x3dh.rotate_identity_key),
    "spk-b": ("mill", x3dh.rotate_signed_pre_key),
    "opk-b": ("mill", x3dh.rotate_one_time_pre_key),
}

def _cmd_x3dh(args):
    params, supplier, mill = x3dh.default_parties()
    if args.rotate:
        params = rotate_parameters()
    if args.p is not None:
        params = with_prime(params, args.p)
    if args.g is not None:
        params = with_generator(params, args.g)

    supplier = x3dh.keys_from_private(
        params,
        _pick(args.ik_a, supplier.identity_key),
        _pick(args.spk_a, supplier.signed_pre_key),
        _pick(args.ek_a, supplier.ephemeral_key),
    )
    one_time_pre = () if args.no_opk else (_pick(args.opk_b, mill.one_time_pre_keys[0]),)
    mill = x3dh.keys_from_private(
        params,
        _pick(args.ik_b, mill.identity_key),
        _pick(args.spk_b, mill.signed_pre_key),
        mill.ephemeral_key.private_key,
        one_time_pre=one_time_pre,
    )

    parties = {"supplier": supplier, "mill": mill}
    for name in args.generate or ():
        party, rotate = _GENERATE[name]
        parties[party] = rotate(parties[party], params)

    x3dh.demo(params, parties["supplier"], parties["mill"])

def _cmd_mitm(args):
    params = DomainParameters(p=13, g=2)
    if args.p is not None:
        params = with_prime(params, args.p)
    dh_mitm_demo.dh_mitm_simulation(params)

def build_parser():
    parser = argparse.ArgumentParser(
        prog="dh-exchange",
        description="Diffie-Hellman and X3DH with deliberately small numbers",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_dh = sub.add_parser("dh", help="basic Supplier/Mill exchange")
    p_dh.add_argument("--p", help="prime modulus (default 13)")
    p_dh.add_argument("--g", help="generator, must be a primitive root of p")
    p_dh.add_argument("--a", help="Supplier private key (default 6)")
    p_dh.add_argument("--b", help="Mill private key (default 15)")
    p_dh.set_defaults(func=_cmd_dh)

    p_rot = sub.add_parser("rotate", help="pick a fresh prime and generator")
    p_rot.set_defaults(func=_cmd_rotate)

    p_x = sub.add_parser("x3dh", help="X3DH between Supplier and Mill")
    p_x.add_argument("--rotate", action="store_true", help="start from a fresh prime and generator")
    p_x.add_argument("--p", help=f"prime modulus (default {x3dh.DEFAULT_PRIME})")
    p_x.add_argument("--g", help="generator, must be a primitive root of p")
    p_x.add_argument("--ik-a", help="Supplier identity private key (default 6)")
    p_x.add_argument("--spk-a", help="Supplier signed pre-key (default 7)")
    p_x.add_argument("--ek-a", help="Supplier ephemeral private key (default 9)")
    p_x.add_argument("--ik-b", help="Mill identity private key (default 15)")
    p_x.add_argument("--spk-b", help="Mill signed pre-key (default 16)")
    p_x.add_argument("--opk-b", help="Mill one-time pre-key (default 17)")
    p_x.add_argument("--no-opk", action="store_true", help="Mill offers no one-time pre-key")
    p_x.add_argument("--generate", action="append", choices=sorted(_GENERATE),
                     help="replace this key with a fresh random one (repeatable)")
    p_x.set_defaults(func=_cmd_x3dh)

    p_m = sub.add_parser("mitm", help="unauthenticated DH with an attacker in the middle")
    p_m.add_argument("--p", help="prime modulus (default 13)")
    p_m.set_defaults(func=_cmd_mitm)
    return parser

def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=config.LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")
    try:
        args.func(args)
    except InvalidInputError as e:
        print(f"Invalid input: {e}", file=sys.stderr)
        return 1
    except ProtocolError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0
