from dh_exchange.keys import DomainParameters, derive_shared_secret, generate_key_pair


def dh_mitm_simulation(params=None):
    print("=== Simulated Man-in-the-Middle Attack (MITM) ===")

    # common parameter
    params = params or DomainParameters(p=13, g=2)
    p = params.p

    # Supplier and Mill each generate a DH key pair
    supplier = generate_key_pair(params)
    mill = generate_key_pair(params)

    # Attacker (Eve) generates a spoofed DH key pair
    eve = generate_key_pair(params)

    print("\n--- No authentication, Eve replaces both public keys ---")
    supplier_shared = derive_shared_secret(supplier.private_key, eve.public_key, p)
    mill_shared = derive_shared_secret(mill.private_key, eve.public_key, p)

    # Eve can compute both sides herself
    eve_with_supplier = derive_shared_secret(eve.private_key, supplier.public_key, p)
    eve_with_mill = derive_shared_secret(eve.private_key, mill.public_key, p)

    print("Supplier thinks it shares with Mill:", supplier_shared)
    print("Mill thinks it shares with Supplier:", mill_shared)
    print("Eve's key with Supplier:            ", eve_with_supplier)
    print("Eve's key with Mill:                ", eve_with_mill)
    print("Both victims actually share their key with Eve (MITM success)")

    return {
        "supplier": supplier_shared,
        "mill": mill_shared,
        "eve_with_supplier": eve_with_supplier,
        "eve_with_mill": eve_with_mill,
    }


if __name__ == "__main__":
    dh_mitm_simulation()
