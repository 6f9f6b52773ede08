"""
Lie-group operations on the flat parameter layouts.

Thin adapters between the 4-number rotation / 7-number transform blocks used
by the residual models and ``jaxlie`` group objects. All group arithmetic
(composition, inverse, exponential and logarithm maps) is delegated to
``jaxlie``; nothing here assumes more about a block than "fixed-length array
convertible to the group".

Every function accepts concrete arrays as well as JAX tracers, so residuals
built from them can be evaluated plainly or differentiated in forward mode.

Manifold difference follows the right-perturbation convention:

    a ⊖ b = Log(b⁻¹ ∘ a),    a ⊕ δ = a ∘ Exp(δ)

SE3 tangent vectors are ordered translation part first, [rho, theta].
"""
import jaxlie

from .utils.jax_init import jnp


def so3_from_vector(q) -> jaxlie.SO3:
    """Rotation from [qw, qx, qy, qz]."""
    return jaxlie.SO3(wxyz=jnp.asarray(q))


def so3_to_vector(R: jaxlie.SO3):
    """[qw, qx, qy, qz] of a rotation."""
    return R.wxyz


def se3_from_vector(X) -> jaxlie.SE3:
    """Rigid transform from [tx, ty, tz, qw, qx, qy, qz]."""
    X = jnp.asarray(X)
    return jaxlie.SE3.from_rotation_and_translation(
        rotation=so3_from_vector(X[3:7]), translation=X[0:3]
    )


def se3_to_vector(T: jaxlie.SE3):
    """[tx, ty, tz, qw, qx, qy, qz] of a rigid transform."""
    return jnp.concatenate([T.translation(), T.rotation().wxyz])


def so3_minus(a: jaxlie.SO3, b: jaxlie.SO3):
    """a ⊖ b, a 3-vector."""
    return (b.inverse() @ a).log()


def se3_minus(a: jaxlie.SE3, b: jaxlie.SE3):
    """a ⊖ b, a 6-vector [rho, theta]."""
    return (b.inverse() @ a).log()


def so3_plus(a: jaxlie.SO3, delta) -> jaxlie.SO3:
    """a ⊕ delta for a 3-vector delta."""
    return a @ jaxlie.SO3.exp(jnp.asarray(delta))


def se3_plus(a: jaxlie.SE3, delta) -> jaxlie.SE3:
    """a ⊕ delta for a 6-vector delta [rho, theta]."""
    return a @ jaxlie.SE3.exp(jnp.asarray(delta))


def transform_point(T: jaxlie.SE3, point):
    """Applies T to a 3D point."""
    return T.apply(jnp.asarray(point))
